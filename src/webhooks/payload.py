"""Outbound webhook wire format."""

import datetime
import json
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from src.storage.database.webhook_models import WebhookEvent


def _json_default(value: Any) -> Any:
    """Convert non-JSON-native values found in event payloads."""
    if isinstance(value, (datetime.datetime, datetime.date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dumps(value: Any) -> str:
    """Serialize a payload for the wire or for the delivery log."""
    return json.dumps(value, default=_json_default, ensure_ascii=False)


def utc_timestamp(moment: Optional[datetime.datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    moment = moment or datetime.datetime.now(datetime.timezone.utc)
    moment = moment.astimezone(datetime.timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_webhook_body(
    wedding_id: str,
    event: WebhookEvent,
    payload: dict[str, Any],
    timestamp: Optional[datetime.datetime] = None,
) -> dict[str, Any]:
    """Build the JSON document POSTed to every subscribed endpoint.

    Args:
        wedding_id: Tenant the event belongs to
        event: Event type
        payload: Event-specific fields
        timestamp: Event time, defaults to now

    Returns:
        Body with ``event``, ``timestamp``, ``payload`` and ``weddingId`` keys
    """
    return {
        "event": event.value,
        "timestamp": utc_timestamp(timestamp),
        "payload": payload,
        "weddingId": wedding_id,
    }


def build_headers(token: str, user_agent: str) -> dict[str, str]:
    """Request headers authenticating the delivery with the wedding's token."""
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {token}",
        "User-Agent": user_agent,
    }
