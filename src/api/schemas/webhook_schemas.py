"""Pydantic schemas for webhooks and access tokens."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, HttpUrl, field_validator

from src.storage.database.webhook_models import WebhookEvent


def _strip_name(value: Optional[str]) -> Optional[str]:
    """Reject whitespace-only names and strip surrounding spaces."""
    if value is None:
        return None
    if not value.strip():
        raise ValueError("name must not be blank")
    return value.strip()


class WebhookEndpointCreate(BaseModel):
    """Webhook endpoint creation request."""

    name: str = Field(..., min_length=1, max_length=255)
    url: HttpUrl
    is_active: bool = True
    events: dict[WebhookEvent, bool] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        """Reject whitespace-only names and strip the rest."""
        return _strip_name(value)


class WebhookEndpointUpdate(BaseModel):
    """Webhook endpoint update request."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    url: Optional[HttpUrl] = None
    is_active: Optional[bool] = None
    events: Optional[dict[WebhookEvent, bool]] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        """Reject whitespace-only names and strip the rest."""
        return _strip_name(value)


class WebhookEndpointResponse(BaseModel):
    """Webhook endpoint response."""

    id: int
    wedding_id: str
    name: str
    url: str
    is_active: bool
    events: dict[str, bool]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class WebhookLogResponse(BaseModel):
    """Webhook delivery log entry."""

    id: int
    endpoint_id: int
    timestamp: datetime
    event_type: str
    payload: str
    response_status: int
    response_body: str
    success: bool

    model_config = {"from_attributes": True}


class ApiTokenCreate(BaseModel):
    """Access token issuance request."""

    name: str = Field(..., max_length=100)


class ApiTokenIssueResponse(BaseModel):
    """Result of issuing a token. The plaintext token is only ever returned here."""

    success: bool
    token: Optional[str] = None
    error: Optional[str] = None


class ApiTokenResponse(BaseModel):
    """Access token as listed after issuance."""

    id: int
    name: str
    masked_token: str
    created_at: datetime

    model_config = {"from_attributes": True}
