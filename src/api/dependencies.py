"""Shared dependencies for FastAPI routes."""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import NotFoundException
from src.planning.service import PlanningService
from src.storage.database.base import get_db
from src.storage.database.models import Wedding
from src.storage.database.repository import WeddingRepository
from src.webhooks.dispatcher import WebhookDispatcher


def get_dispatcher(request: Request) -> WebhookDispatcher:
    """Application-wide webhook dispatcher, created on startup.

    Args:
        request: Incoming request

    Returns:
        WebhookDispatcher bound to the application
    """
    dispatcher = getattr(request.app.state, "dispatcher", None)
    if dispatcher is None:
        dispatcher = WebhookDispatcher()
        request.app.state.dispatcher = dispatcher
    return dispatcher


async def get_wedding(
    wedding_id: str,
    db: AsyncSession = Depends(get_db),
) -> Wedding:
    """Resolve the wedding from the path.

    Raises:
        NotFoundException: If the wedding does not exist
    """
    wedding = await WeddingRepository(db).get_by_id(wedding_id)
    if wedding is None:
        raise NotFoundException("Wedding not found")
    return wedding


def get_planning_service(
    db: AsyncSession = Depends(get_db),
    dispatcher: WebhookDispatcher = Depends(get_dispatcher),
) -> PlanningService:
    """Planning service bound to the request session."""
    return PlanningService(db, dispatcher)
