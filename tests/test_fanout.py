"""Fan-out tests — who receives a broadcast, and what a miss looks like."""

import pytest
from fastapi import WebSocketDisconnect

from orderrelay.realtime.registry import DEFAULT_GROUP


@pytest.mark.asyncio
async def test_broadcast_reaches_every_group_member(connect, fanout):
    sockets = [(await connect())[1] for _ in range(3)]

    targeted = await fanout.broadcast(DEFAULT_GROUP, "order_deleted", {"order_id": 7})

    assert targeted == 3
    for ws in sockets:
        assert ws.events() == [{"type": "order_deleted", "order_id": 7}]


@pytest.mark.asyncio
async def test_broadcast_skips_non_members(connect, registry, fanout):
    """Members of another group only — or nobody at all — get nothing."""
    a, ws_a = await connect()
    _, ws_b = await connect()
    registry.join(a, "order:1")

    await fanout.broadcast("order:1", "comment_deleted", {"order_id": 1, "comment_id": 2})

    assert ws_a.events() == [{"type": "comment_deleted", "order_id": 1, "comment_id": 2}]
    assert ws_b.events() == []


@pytest.mark.asyncio
async def test_broadcast_to_empty_group(fanout):
    assert await fanout.broadcast(DEFAULT_GROUP, "order_created", {"order": {}}) == 0


@pytest.mark.asyncio
async def test_disconnected_clients_do_not_receive(connect, registry, fanout):
    a, ws_a = await connect()
    _, ws_b = await connect()
    registry.disconnect(a)

    await fanout.broadcast(DEFAULT_GROUP, "order_updated", {"order": {"id": 1}})

    assert ws_a.events() == []
    assert len(ws_b.events()) == 1


@pytest.mark.asyncio
async def test_client_gone_mid_send_is_not_an_error(connect, registry, fanout):
    """A socket that closed after the snapshot is dropped silently."""
    gone, ws_gone = await connect()
    _, ws_ok = await connect()
    ws_gone.fail_with = WebSocketDisconnect(code=1006)

    targeted = await fanout.broadcast(DEFAULT_GROUP, "order_deleted", {"order_id": 3})

    assert targeted == 2
    assert ws_ok.events() == [{"type": "order_deleted", "order_id": 3}]
    # The receive loop owns removal for ordinary disconnects
    assert gone in registry


@pytest.mark.asyncio
async def test_transport_error_isolated_to_one_client(connect, registry, fanout):
    broken, ws_broken = await connect()
    _, ws_ok = await connect()
    ws_broken.fail_with = OSError("connection reset")

    await fanout.broadcast(DEFAULT_GROUP, "order_deleted", {"order_id": 4})

    assert ws_ok.events() == [{"type": "order_deleted", "order_id": 4}]
    assert broken not in registry
    assert registry.count == 1
    # The socket is closed too, so the client is not left connected but uncounted
    assert ws_broken.closed_with == 1011


@pytest.mark.asyncio
async def test_failed_close_after_transport_error_is_tolerated(connect, registry, fanout):
    broken, ws_broken = await connect()
    ws_broken.fail_with = OSError("connection reset")

    async def close_fails(code=1000, reason=None):
        raise OSError("already gone")

    ws_broken.close = close_fails

    await fanout.broadcast(DEFAULT_GROUP, "order_deleted", {"order_id": 5})

    assert broken not in registry


@pytest.mark.asyncio
async def test_broadcast_order_follows_call_order(connect, fanout):
    _, ws = await connect()
    for i in range(5):
        await fanout.broadcast(DEFAULT_GROUP, "order_deleted", {"order_id": i})
    assert [m["order_id"] for m in ws.events()] == [0, 1, 2, 3, 4]
