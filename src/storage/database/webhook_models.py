"""Webhook models for event notifications."""

import datetime
import secrets
from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, JSON, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from src.storage.database.base import Base, TimestampMixin

TOKEN_PREFIX = "ppt_"
TOKEN_RANDOM_BYTES = 24


class WebhookEvent(str, Enum):
    """Webhook event types."""

    GUEST_RSVP = "guestRsvp"
    TASK_COMPLETED = "taskCompleted"
    BUDGET_ITEM_ADDED = "budgetItemAdded"
    GIFT_RECEIVED = "giftReceived"
    SONG_SUGGESTED = "songSuggested"

    @classmethod
    def subscription_map(cls, enabled: Optional[dict] = None) -> dict[str, bool]:
        """Build a full event opt-in map, defaulting unknown entries to False."""
        enabled = enabled or {}
        result = {}
        for event in cls:
            value = enabled.get(event, enabled.get(event.value, False))
            result[event.value] = bool(value)
        return result


class ApiToken(Base):
    """Bearer credential presented to webhook endpoints on behalf of a wedding."""

    __tablename__ = "api_tokens"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    wedding_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("weddings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    token: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    @staticmethod
    def generate_token() -> str:
        """Generate a new opaque token (192 random bits, hex encoded)."""
        return f"{TOKEN_PREFIX}{secrets.token_hex(TOKEN_RANDOM_BYTES)}"

    @property
    def masked_token(self) -> str:
        """Token shortened for display after issuance."""
        return f"{self.token[:6]}...{self.token[-4:]}"

    def __repr__(self) -> str:
        return f"<ApiToken(name='{self.name}', wedding_id='{self.wedding_id}')>"


class WebhookEndpoint(Base, TimestampMixin):
    """Webhook endpoint configuration model."""

    __tablename__ = "webhook_endpoints"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    wedding_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("weddings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Per-event opt-in map, e.g. {"guestRsvp": true, "taskCompleted": false}
    events: Mapped[dict] = mapped_column(JSON, nullable=False, default=lambda: WebhookEvent.subscription_map())

    def is_subscribed(self, event: WebhookEvent) -> bool:
        """Whether this endpoint should receive the given event."""
        return bool(self.is_active and (self.events or {}).get(event.value))

    def __repr__(self) -> str:
        return f"<WebhookEndpoint(id={self.id}, name='{self.name}', url='{self.url}')>"


class WebhookLog(Base):
    """Append-only record of one webhook delivery attempt."""

    __tablename__ = "webhook_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    endpoint_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("webhook_endpoints.id", ondelete="CASCADE"), nullable=False, index=True
    )
    timestamp: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )
    event_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)  # serialized JSON
    response_status: Mapped[int] = mapped_column(Integer, nullable=False)
    response_body: Mapped[str] = mapped_column(Text, nullable=False, default="")
    success: Mapped[bool] = mapped_column(Boolean, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<WebhookLog(id={self.id}, endpoint_id={self.endpoint_id}, "
            f"event_type='{self.event_type}', success={self.success})>"
        )
