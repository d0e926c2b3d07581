"""Fan-out — deliver one event to every member of a group.

Best-effort and fire-and-forget: no acknowledgements are collected and a
failed send is never retried. Targets are snapshotted when the broadcast
starts; a client that leaves mid-broadcast is skipped quietly.

Learn: a send can fail two ways. A socket that is already closing is an
ordinary miss and its own receive loop cleans up. Anything else means the
socket is unusable, so the connection is dropped from the registry and
the socket is closed with 1011, which ends that client's receive loop.
"""

from typing import Any

import structlog
from fastapi import WebSocketDisconnect

from orderrelay.realtime.registry import Connection, ConnectionRegistry

logger = structlog.get_logger()

# WebSocket close code "internal error"
INTERNAL_ERROR = 1011


class FanOut:
    def __init__(self, registry: ConnectionRegistry):
        self.registry = registry

    async def broadcast(self, group: str, event_type: str, payload: dict[str, Any]) -> int:
        """Send ``{"type": event_type, **payload}`` to everyone in ``group``.

        Returns how many connections were targeted.
        """
        message = {"type": event_type, **payload}
        targets = self.registry.members(group)
        for connection in targets:
            await self._deliver(connection, message)
        return len(targets)

    async def _deliver(self, connection: Connection, message: dict[str, Any]) -> None:
        if not connection.is_connected or connection not in self.registry:
            logger.debug("relay.delivery_missed", client_id=connection.id, event_type=message["type"])
            return
        try:
            await connection.send(message)
        except (WebSocketDisconnect, RuntimeError) as e:
            # Closed between the group snapshot and this send
            logger.debug(
                "relay.delivery_missed",
                client_id=connection.id,
                event_type=message["type"],
                error=str(e),
            )
        except Exception as e:
            logger.warning(
                "relay.transport_error",
                client_id=connection.id,
                event_type=message["type"],
                error=str(e),
            )
            self.registry.disconnect(connection, reason="transport error")
            try:
                # Ends the client's receive loop
                await connection.websocket.close(code=INTERNAL_ERROR)
            except Exception as close_error:
                logger.debug("relay.close_failed", client_id=connection.id, error=str(close_error))
