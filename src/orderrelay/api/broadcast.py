"""Ingestion API — the authoritative backend publishes events here.

One POST route per event kind, generated from the catalog so every kind
follows the same contract:
- body must be a JSON object carrying the kind's required fields
- 400 {"error": ...} when a field is missing, nothing is broadcast
- 200 {"success", "message", "clients"} after the event is fanned out

There is no deduplication; posting the same body twice broadcasts twice.
"""

import json

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from orderrelay.api.dependencies import get_fanout
from orderrelay.events.catalog import (
    EVENT_KINDS,
    EventKind,
    EventValidationError,
    INVALID_JSON,
    summarize,
)
from orderrelay.realtime.fanout import FanOut
from orderrelay.realtime.registry import DEFAULT_GROUP

logger = structlog.get_logger()
router = APIRouter(prefix="/broadcast")


# ─── Schemas ─────────────────────────────────────────────


class BroadcastResult(BaseModel):
    success: bool = True
    message: str
    clients: int


class ErrorResponse(BaseModel):
    error: str


# ─── Handlers ────────────────────────────────────────────


async def validation_error_handler(request: Request, exc: EventValidationError) -> JSONResponse:
    """Render ingestion validation failures as 400 {"error": ...}."""
    logger.info(
        "relay.rejected",
        path=request.url.path,
        error=exc.message,
        missing=list(exc.missing),
    )
    return JSONResponse(status_code=400, content={"error": exc.message})


async def _read_body(request: Request):
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise EventValidationError(INVALID_JSON)


def _make_handler(kind: EventKind):
    async def handler(request: Request, fanout: FanOut = Depends(get_fanout)):
        fields = kind.build(await _read_body(request))
        targeted = await fanout.broadcast(DEFAULT_GROUP, kind.type, fields)
        logger.info("relay.broadcast", event_type=kind.type, targeted=targeted, **summarize(fields))
        return BroadcastResult(
            message=f"{kind.label} event broadcasted",
            clients=fanout.registry.count,
        )

    handler.__name__ = f"broadcast_{kind.type}"
    handler.__doc__ = f"Broadcast `{kind.type}` to every connected client."
    return handler


for _kind in EVENT_KINDS:
    router.add_api_route(
        _kind.path,
        _make_handler(_kind),
        methods=["POST"],
        response_model=BroadcastResult,
        responses={400: {"model": ErrorResponse}},
        name=f"broadcast_{_kind.type}",
        tags=["broadcast"],
    )
