"""Heartbeat reply tests."""

import time

from orderrelay.realtime.heartbeat import now_ms, pong_for


def test_pong_echoes_client_timestamp():
    assert pong_for({"type": "ping", "timestamp": 1234}) == {"type": "pong", "timestamp": 1234}


def test_pong_without_timestamp_uses_server_time():
    before = int(time.time() * 1000)
    reply = pong_for({"type": "ping"})
    after = int(time.time() * 1000)

    assert reply["type"] == "pong"
    assert before <= reply["timestamp"] <= after


def test_now_ms_is_milliseconds():
    # Seconds would be ~1.7e9, milliseconds ~1.7e12
    assert now_ms() > 10**12
