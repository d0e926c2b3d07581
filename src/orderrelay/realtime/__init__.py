"""Real-time infrastructure — in-memory connection registry + WebSocket.

Events flow one way through the relay:
1. Ingestion API → FanOut.broadcast (backend-side publish)
2. FanOut → every WebSocket in the group → browser

Everything lives in this process. A client that is not connected when
an event is broadcast never sees it; the frontend is expected to refetch
from the backend on reconnect.
"""
