"""FastAPI dependencies — hand handlers the app-owned realtime objects."""

from fastapi import Request

from orderrelay.realtime.fanout import FanOut
from orderrelay.realtime.registry import ConnectionRegistry


def get_registry(request: Request) -> ConnectionRegistry:
    return request.app.state.registry


def get_fanout(request: Request) -> FanOut:
    return request.app.state.fanout
