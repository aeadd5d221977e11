"""Webhook endpoint management routes."""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_wedding
from src.api.schemas.webhook_schemas import (
    WebhookEndpointCreate,
    WebhookEndpointResponse,
    WebhookEndpointUpdate,
    WebhookLogResponse,
)
from src.core.exceptions import NotFoundException
from src.storage.database.base import get_db
from src.storage.database.models import Wedding
from src.storage.database.webhook_models import WebhookEndpoint, WebhookEvent
from src.storage.database.webhook_repository import WebhookEndpointRepository, WebhookLogRepository

router = APIRouter(tags=["webhooks"])


async def _get_endpoint(db: AsyncSession, wedding_id: str, endpoint_id: int) -> WebhookEndpoint:
    endpoint = await WebhookEndpointRepository(db).get_by_id(wedding_id, endpoint_id)
    if endpoint is None:
        raise NotFoundException("Webhook endpoint not found")
    return endpoint


@router.get("/weddings/{wedding_id}/webhooks", response_model=list[WebhookEndpointResponse])
async def list_webhooks(
    wedding: Wedding = Depends(get_wedding),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """List all webhook endpoints of a wedding."""
    return await WebhookEndpointRepository(db).list_endpoints(wedding.id)


@router.post("/weddings/{wedding_id}/webhooks", response_model=WebhookEndpointResponse, status_code=201)
async def create_webhook(
    endpoint_data: WebhookEndpointCreate,
    wedding: Wedding = Depends(get_wedding),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """Create new webhook endpoint."""
    endpoint = await WebhookEndpointRepository(db).create(
        wedding.id,
        name=endpoint_data.name,
        url=str(endpoint_data.url),
        events=endpoint_data.events,
        is_active=endpoint_data.is_active,
    )
    await db.commit()
    return endpoint


@router.get("/weddings/{wedding_id}/webhooks/{endpoint_id}", response_model=WebhookEndpointResponse)
async def get_webhook(
    endpoint_id: int,
    wedding: Wedding = Depends(get_wedding),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """Get webhook endpoint by ID."""
    return await _get_endpoint(db, wedding.id, endpoint_id)


@router.patch("/weddings/{wedding_id}/webhooks/{endpoint_id}", response_model=WebhookEndpointResponse)
async def update_webhook(
    endpoint_id: int,
    endpoint_data: WebhookEndpointUpdate,
    wedding: Wedding = Depends(get_wedding),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """Update webhook endpoint."""
    endpoint = await _get_endpoint(db, wedding.id, endpoint_id)

    update_data = endpoint_data.model_dump(exclude_unset=True, exclude_none=True)
    if "url" in update_data:
        update_data["url"] = str(update_data["url"])

    endpoint = await WebhookEndpointRepository(db).update(endpoint, **update_data)
    await db.commit()
    return endpoint


@router.post("/weddings/{wedding_id}/webhooks/{endpoint_id}/toggle", response_model=WebhookEndpointResponse)
async def toggle_webhook(
    endpoint_id: int,
    wedding: Wedding = Depends(get_wedding),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """Enable or disable a webhook endpoint."""
    endpoint = await _get_endpoint(db, wedding.id, endpoint_id)
    endpoint = await WebhookEndpointRepository(db).toggle_active(endpoint)
    await db.commit()
    return endpoint


@router.delete("/weddings/{wedding_id}/webhooks/{endpoint_id}", status_code=204)
async def delete_webhook(
    endpoint_id: int,
    wedding: Wedding = Depends(get_wedding),
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete webhook endpoint and its delivery logs."""
    endpoint = await _get_endpoint(db, wedding.id, endpoint_id)
    await WebhookEndpointRepository(db).delete(endpoint)
    await db.commit()


@router.get(
    "/weddings/{wedding_id}/webhooks/{endpoint_id}/logs",
    response_model=list[WebhookLogResponse],
)
async def list_webhook_logs(
    endpoint_id: int,
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    wedding: Wedding = Depends(get_wedding),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """List delivery attempts of an endpoint, newest first."""
    await _get_endpoint(db, wedding.id, endpoint_id)
    return await WebhookLogRepository(db).list_logs(wedding.id, endpoint_id, limit=limit, offset=offset)


@router.get("/webhooks/events/types", response_model=list[str])
async def list_event_types() -> Any:
    """List available webhook event types."""
    return [event.value for event in WebhookEvent]
