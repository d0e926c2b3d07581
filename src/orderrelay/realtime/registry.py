"""Connection registry — who is connected and which groups they joined.

The registry is owned by the app (``app.state.registry``) and only ever
touched from the event loop. Every mutation below is synchronous between
awaits, so membership and the live count stay consistent without locks.

Group membership is keyed by name even though clients only ever join
``DEFAULT_GROUP`` today; routing events by tenant or order later means
calling ``join`` with another name, not restructuring this class.

Learn: the count is never stored. It is the size of the connection dict,
so a missed increment or a double decrement simply cannot happen.
"""

import enum
import secrets
from dataclasses import dataclass, field
from typing import Any

import structlog
from fastapi import WebSocket

from orderrelay.events.types import CONNECTION_ESTABLISHED

logger = structlog.get_logger()

DEFAULT_GROUP = "order_updates"

# WebSocket close code "going away", sent to clients on shutdown
GOING_AWAY = 1001


class ConnectionState(str, enum.Enum):
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


@dataclass(eq=False)
class Connection:
    """One realtime client's live channel."""

    id: str
    websocket: WebSocket
    state: ConnectionState = ConnectionState.CONNECTING
    groups: set[str] = field(default_factory=set)

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    async def send(self, message: dict[str, Any]) -> None:
        await self.websocket.send_json(message)


def new_client_id() -> str:
    """Opaque, URL-safe, 20 characters."""
    return secrets.token_urlsafe(15)


class ConnectionRegistry:
    """Live connections and their group memberships."""

    def __init__(self) -> None:
        self._connections: dict[str, Connection] = {}
        self._groups: dict[str, set[str]] = {}

    # ─── Lifecycle ───────────────────────────────────────

    async def connect(self, websocket: WebSocket) -> Connection:
        """Admit a client: accept, register, join the default group, ack.

        The acknowledgement goes to this connection only.
        """
        connection = Connection(id=new_client_id(), websocket=websocket)
        await websocket.accept()

        self._connections[connection.id] = connection
        self.join(connection, DEFAULT_GROUP)
        connection.state = ConnectionState.CONNECTED

        logger.info(
            "relay.client_connected",
            client_id=connection.id,
            group=DEFAULT_GROUP,
            total=self.count,
        )

        try:
            await connection.send({
                "type": CONNECTION_ESTABLISHED,
                "message": "Connected to order updates",
                "clientId": connection.id,
            })
        except Exception:
            self.disconnect(connection, reason="handshake failed")
            raise
        return connection

    def disconnect(self, connection: Connection, reason: str = "client disconnect") -> bool:
        """Remove a connection from the registry and all of its groups.

        Returns False (and does nothing) if it was already removed.
        """
        if self._connections.pop(connection.id, None) is None:
            return False

        for group in connection.groups:
            members = self._groups.get(group)
            if members is None:
                continue
            members.discard(connection.id)
            if not members:
                del self._groups[group]
        connection.groups.clear()
        connection.state = ConnectionState.DISCONNECTED

        logger.info(
            "relay.client_disconnected",
            client_id=connection.id,
            reason=reason,
            remaining=self.count,
        )
        return True

    async def close_all(self, reason: str = "server shutting down") -> int:
        """Close every live connection and empty the registry."""
        connections = list(self._connections.values())
        for connection in connections:
            self.disconnect(connection, reason=reason)
            try:
                await connection.websocket.close(code=GOING_AWAY, reason=reason)
            except Exception as e:
                # Socket already gone on the client side
                logger.debug("relay.close_failed", client_id=connection.id, error=str(e))
        return len(connections)

    # ─── Groups ──────────────────────────────────────────

    def join(self, connection: Connection, group: str) -> None:
        self._groups.setdefault(group, set()).add(connection.id)
        connection.groups.add(group)

    def members(self, group: str) -> list[Connection]:
        """Snapshot of the connections currently in ``group``."""
        ids = self._groups.get(group, ())
        return [self._connections[cid] for cid in ids if cid in self._connections]

    # ─── Introspection ───────────────────────────────────

    @property
    def count(self) -> int:
        return len(self._connections)

    def __contains__(self, connection: Connection) -> bool:
        return self._connections.get(connection.id) is connection
