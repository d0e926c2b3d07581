"""FastAPI application factory.

create_app() returns a configured FastAPI instance that owns its
realtime state: the connection registry and the fan-out built on it
live on ``app.state``, so each app (and each test) gets its own.
Lifespan logs the configuration at startup and closes every live
connection at shutdown.

Learn: keeping the registry on app.state instead of a module global means
tests can build as many isolated apps as they like with create_app().
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orderrelay import __version__
from orderrelay.api import api_router
from orderrelay.api.broadcast import validation_error_handler
from orderrelay.config import Settings, settings
from orderrelay.events.catalog import EventValidationError
from orderrelay.middleware.request_id import RequestIdMiddleware
from orderrelay.realtime.fanout import FanOut
from orderrelay.realtime.registry import ConnectionRegistry
from orderrelay.realtime.websocket import router as ws_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    config: Settings = app.state.settings
    logger.info(
        "relay.starting",
        version=__version__,
        environment=config.environment,
        port=config.port,
        cors_origins=config.cors_origins_list,
    )

    yield

    # Uvicorn has stopped accepting connections by now
    registry: ConnectionRegistry = app.state.registry
    closed = await registry.close_all()
    logger.info("relay.shutdown", closed=closed)


def create_app(config: Settings | None = None) -> FastAPI:
    """Build and return the FastAPI application."""
    config = config or settings

    app = FastAPI(
        title="Order Relay",
        description="Realtime fan-out of order and comment events to connected browsers",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = config
    app.state.registry = ConnectionRegistry()
    app.state.fanout = FanOut(app.state.registry)

    # ── Middleware stack ──────────────────────────────────────
    # Starlette runs middleware in reverse order of registration:
    # RequestId → CORS → handler
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    app.add_exception_handler(EventValidationError, validation_error_handler)

    app.include_router(api_router)
    app.include_router(ws_router)

    return app


# Default app instance (used by uvicorn: orderrelay.main:app)
app = create_app()
