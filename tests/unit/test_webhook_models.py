"""Tests for webhook models."""

import re

from src.storage.database.webhook_models import (
    TOKEN_PREFIX,
    ApiToken,
    WebhookEndpoint,
    WebhookEvent,
    WebhookLog,
)


def test_event_taxonomy() -> None:
    """Test the closed set of event types."""
    assert [event.value for event in WebhookEvent] == [
        "guestRsvp",
        "taskCompleted",
        "budgetItemAdded",
        "giftReceived",
        "songSuggested",
    ]


def test_subscription_map_fills_missing_events() -> None:
    """Test opt-in maps always cover every event type."""
    events = WebhookEvent.subscription_map({"guestRsvp": True})

    assert events == {
        "guestRsvp": True,
        "taskCompleted": False,
        "budgetItemAdded": False,
        "giftReceived": False,
        "songSuggested": False,
    }


def test_subscription_map_accepts_enum_keys() -> None:
    """Test enum members work as keys."""
    events = WebhookEvent.subscription_map({WebhookEvent.GIFT_RECEIVED: True})

    assert events["giftReceived"] is True


def test_generate_token() -> None:
    """Test token format: prefix plus 48 hex characters."""
    token = ApiToken.generate_token()

    assert token.startswith(TOKEN_PREFIX)
    assert re.fullmatch(r"ppt_[0-9a-f]{48}", token)
    assert ApiToken.generate_token() != token


def test_masked_token() -> None:
    """Test display masking keeps first 6 and last 4 characters."""
    api_token = ApiToken(name="Zapier", token="ppt_0123456789abcdef")

    assert api_token.masked_token == "ppt_01...cdef"


def test_endpoint_subscription() -> None:
    """Test an endpoint receives an event only when active and opted in."""
    endpoint = WebhookEndpoint(
        wedding_id="w",
        name="CRM",
        url="https://crm.example.com/hook",
        is_active=True,
        events=WebhookEvent.subscription_map({"guestRsvp": True, "taskCompleted": False}),
    )

    assert endpoint.is_subscribed(WebhookEvent.GUEST_RSVP)
    assert not endpoint.is_subscribed(WebhookEvent.TASK_COMPLETED)

    endpoint.is_active = False
    assert not endpoint.is_subscribed(WebhookEvent.GUEST_RSVP)


def test_webhook_log_repr() -> None:
    """Test WebhookLog string representation."""
    log = WebhookLog(endpoint_id=3, event_type="giftReceived", payload="{}", response_status=200, success=True)

    assert "giftReceived" in repr(log)
    assert "endpoint_id=3" in repr(log)
