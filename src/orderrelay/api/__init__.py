"""API route aggregation.

All routers registered here get mounted in main.py. Nothing is
authenticated: the relay trusts whoever can reach it on the network.
"""

from fastapi import APIRouter

from orderrelay.api.broadcast import router as broadcast_router
from orderrelay.api.health import router as health_router

api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(broadcast_router)
