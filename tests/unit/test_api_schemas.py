"""Tests for API request schemas."""

import pytest
from pydantic import ValidationError

from src.api.schemas.webhook_schemas import ApiTokenCreate, WebhookEndpointCreate, WebhookEndpointUpdate


def test_endpoint_create_strips_name() -> None:
    """Test endpoint names are stripped on creation."""
    data = WebhookEndpointCreate(name="  CRM  ", url="https://crm.example.com/hook")

    assert data.name == "CRM"


def test_endpoint_update_rejects_blank_name() -> None:
    """Test a whitespace-only name is rejected on update as well."""
    with pytest.raises(ValidationError):
        WebhookEndpointUpdate(name="   ")


def test_endpoint_update_name_optional() -> None:
    """Test updates without a name stay valid and strip when given."""
    assert WebhookEndpointUpdate(is_active=False).name is None
    assert WebhookEndpointUpdate(name=" Sheets ").name == "Sheets"


def test_token_name_length_matches_column() -> None:
    """Test token names longer than the stored column are rejected."""
    assert ApiTokenCreate(name="x" * 100).name == "x" * 100

    with pytest.raises(ValidationError):
        ApiTokenCreate(name="x" * 101)
