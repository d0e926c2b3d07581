"""Order Relay — realtime fan-out of order and comment events.

The authoritative backend POSTs lifecycle events here; the relay pushes
them to every browser connected over WebSocket, so the backend never
has to hold client connections itself.
"""

__version__ = "1.0.0"
