"""Heartbeat — ping/pong echo so clients can check the link is alive.

The server never drops a silent client; liveness is the client's call.
"""

import time
from typing import Any

from orderrelay.events.types import PONG


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


def pong_for(message: dict[str, Any]) -> dict[str, Any]:
    """Build the reply to a ``ping``.

    Echoes the client's timestamp, or stamps the server time when the
    client sent none.
    """
    return {"type": PONG, "timestamp": message.get("timestamp") or now_ms()}
