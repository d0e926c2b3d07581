"""Status endpoints — liveness and service identification.

Always answer while the process is up; there are no downstream
dependencies to probe.
"""

import time

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from orderrelay import __version__
from orderrelay.api.dependencies import get_registry
from orderrelay.realtime.registry import ConnectionRegistry

router = APIRouter()

SERVICE_NAME = "Order Relay for realtime order updates"

_started = time.monotonic()


class HealthStatus(BaseModel):
    status: str = "ok"
    connected_clients: int = Field(serialization_alias="connectedClients")
    uptime: float = Field(description="Seconds since the process started")


class ServiceInfo(BaseModel):
    message: str = SERVICE_NAME
    version: str = __version__
    connected_clients: int = Field(serialization_alias="connectedClients")


def uptime_seconds() -> float:
    return time.monotonic() - _started


@router.get("/health", response_model=HealthStatus)
async def health_check(registry: ConnectionRegistry = Depends(get_registry)):
    """Report connected clients and process uptime."""
    return HealthStatus(connected_clients=registry.count, uptime=uptime_seconds())


@router.get("/", response_model=ServiceInfo)
async def service_info(registry: ConnectionRegistry = Depends(get_registry)):
    return ServiceInfo(connected_clients=registry.count)
