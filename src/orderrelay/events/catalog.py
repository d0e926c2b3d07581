"""Ingestion catalog — one entry per event kind the backend can publish.

Every kind shares the same contract: a JSON object body, a set of
required fields checked for presence only, and an outgoing event that
carries exactly those fields plus ``type``. The HTTP handlers in
``orderrelay.api.broadcast`` are generated from ``EVENT_KINDS``.
"""

from dataclasses import dataclass
from typing import Any

from orderrelay.events import types

MISSING_FIELDS = "Missing required fields"
NOT_AN_OBJECT = "Request body must be a JSON object"
INVALID_JSON = "Request body must be valid JSON"


class EventValidationError(Exception):
    """An ingestion body is missing required fields (HTTP 400)."""

    def __init__(self, message: str, missing: tuple[str, ...] = ()):
        super().__init__(message)
        self.message = message
        self.missing = missing


@dataclass(frozen=True)
class EventKind:
    type: str
    slug: str
    label: str
    required: tuple[str, ...]
    error: str = MISSING_FIELDS

    @property
    def path(self) -> str:
        return f"/{self.slug}"

    def build(self, body: Any) -> dict[str, Any]:
        """Validate ``body`` and return the event fields to broadcast.

        A field is absent when its key is missing or its value is null.
        Values are forwarded as received; anything beyond the required
        fields is dropped.
        """
        if not isinstance(body, dict):
            raise EventValidationError(NOT_AN_OBJECT)
        missing = tuple(name for name in self.required if body.get(name) is None)
        if missing:
            raise EventValidationError(self.error, missing)
        return {name: body[name] for name in self.required}


EVENT_KINDS: tuple[EventKind, ...] = (
    EventKind(
        types.ORDER_CREATED, "order-created", "Order created",
        ("order",), error="Order data is required",
    ),
    EventKind(
        types.ORDER_UPDATED, "order-updated", "Order updated",
        ("order",), error="Order data is required",
    ),
    EventKind(
        types.ORDER_DELETED, "order-deleted", "Order deleted",
        ("order_id",), error="Order ID is required",
    ),
    EventKind(
        types.ORDER_STATUS_CHANGED, "order-status-changed", "Order status changed",
        ("order_id", "old_status", "new_status", "order"),
    ),
    EventKind(
        types.ORDER_IMAGE_UPLOADED, "order-image-uploaded", "Order image uploaded",
        ("order_id", "image", "order"),
    ),
    EventKind(
        types.ORDER_IMAGE_DELETED, "order-image-deleted", "Order image deleted",
        ("order_id", "image_id", "order"),
    ),
    EventKind(
        types.ORDER_ASSIGNED, "order-assigned", "Order assigned",
        ("order_id", "assigned_users", "order"),
    ),
    EventKind(
        types.COMMENT_CREATED, "comment-created", "Comment created",
        ("order_id", "comment"),
    ),
    EventKind(
        types.COMMENT_UPDATED, "comment-updated", "Comment updated",
        ("order_id", "comment"),
    ),
    EventKind(
        types.COMMENT_DELETED, "comment-deleted", "Comment deleted",
        ("order_id", "comment_id"),
    ),
)

BY_SLUG: dict[str, EventKind] = {kind.slug: kind for kind in EVENT_KINDS}


def summarize(fields: dict[str, Any]) -> dict[str, Any]:
    """Pick identifiers worth logging out of an event's fields."""
    summary: dict[str, Any] = {}
    if "order_id" in fields:
        summary["order_id"] = fields["order_id"]
    order = fields.get("order")
    if isinstance(order, dict) and "order_number" in order:
        summary["order_number"] = order["order_number"]
    if "old_status" in fields:
        summary["status"] = f"{fields['old_status']} -> {fields['new_status']}"
    comment = fields.get("comment")
    if isinstance(comment, dict) and "id" in comment:
        summary["comment_id"] = comment["id"]
    elif "comment_id" in fields:
        summary["comment_id"] = fields["comment_id"]
    if "image_id" in fields:
        summary["image_id"] = fields["image_id"]
    return summary
