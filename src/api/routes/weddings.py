"""Wedding (tenant) routes."""

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_wedding
from src.api.schemas.schemas import WeddingCreate, WeddingResponse
from src.core.exceptions import ConflictException
from src.storage.database.base import get_db
from src.storage.database.models import Wedding
from src.storage.database.repository import WeddingRepository

router = APIRouter(prefix="/weddings", tags=["weddings"])


@router.post("", response_model=WeddingResponse, status_code=201)
async def create_wedding(
    wedding_data: WeddingCreate,
    db: AsyncSession = Depends(get_db),
) -> Any:
    """Create new wedding."""
    repository = WeddingRepository(db)
    if wedding_data.id is not None and await repository.get_by_id(wedding_data.id) is not None:
        raise ConflictException("Wedding already exists")

    wedding = await repository.create(wedding_data.name, wedding_id=wedding_data.id)
    await db.commit()
    return wedding


@router.get("/{wedding_id}", response_model=WeddingResponse)
async def get_wedding_by_id(wedding: Wedding = Depends(get_wedding)) -> Any:
    """Get wedding by ID."""
    return wedding
