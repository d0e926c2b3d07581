"""WebSocket endpoint — realtime delivery to browser clients.

Each browser tab opens one connection to /ws. The handler:
1. Admits the client into the registry (auto-joins "order_updates")
2. Answers heartbeat pings until the client goes away
3. Removes the client from the registry however the loop ends

Broadcast traffic does not pass through this loop; FanOut writes to the
socket directly. The loop only reads what the client sends.
"""

import json

import structlog
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from orderrelay.events.types import PING
from orderrelay.realtime.heartbeat import pong_for
from orderrelay.realtime.registry import Connection, ConnectionRegistry

logger = structlog.get_logger()
router = APIRouter()


@router.websocket("/ws")
async def relay_websocket(websocket: WebSocket):
    """Realtime order updates for one client.

    No authentication: any client that can reach the relay may subscribe.
    """
    registry: ConnectionRegistry = websocket.app.state.registry

    try:
        connection = await registry.connect(websocket)
    except WebSocketDisconnect:
        # Client left before the handshake finished
        return

    reason = "client disconnect"
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                reason = f"client disconnect ({message.get('code', 1000)})"
                break

            data = message.get("text")
            if data is None and message.get("bytes") is not None:
                data = message["bytes"].decode("utf-8", errors="replace")
            if data:
                await handle_client_message(connection, data)
    except WebSocketDisconnect as e:
        reason = f"client disconnect ({e.code})"
    except Exception as e:
        reason = "transport error"
        logger.warning("relay.transport_error", client_id=connection.id, error=str(e))
    finally:
        registry.disconnect(connection, reason=reason)


async def handle_client_message(connection: Connection, data: str) -> None:
    """Dispatch one client frame. Only ``ping`` is understood."""
    try:
        msg = json.loads(data)
    except json.JSONDecodeError:
        logger.debug("relay.unreadable_message", client_id=connection.id)
        return

    if not isinstance(msg, dict):
        return

    if msg.get("type") == PING:
        await connection.send(pong_for(msg))
        logger.debug("relay.heartbeat", client_id=connection.id)
