"""Event type constants.

Centralizing event types as constants prevents typos and makes it easy
to discover every message the relay can put on the wire.
"""

# ─── Connection protocol ─────────────────────────────────

CONNECTION_ESTABLISHED = "connection_established"
PING = "ping"
PONG = "pong"

# ─── Order lifecycle ─────────────────────────────────────

ORDER_CREATED = "order_created"
ORDER_UPDATED = "order_updated"
ORDER_DELETED = "order_deleted"
ORDER_STATUS_CHANGED = "order_status_changed"
ORDER_IMAGE_UPLOADED = "order_image_uploaded"
ORDER_IMAGE_DELETED = "order_image_deleted"
ORDER_ASSIGNED = "order_assigned"

# ─── Comments ────────────────────────────────────────────

COMMENT_CREATED = "comment_created"
COMMENT_UPDATED = "comment_updated"
COMMENT_DELETED = "comment_deleted"
