"""Planning routes: guests, tasks, budget, gifts and playlist."""

from typing import Any

from fastapi import APIRouter, Depends

from src.api.dependencies import get_planning_service, get_wedding
from src.api.schemas.schemas import (
    BudgetItemCreate,
    BudgetItemResponse,
    GiftCreate,
    GiftResponse,
    GuestCreate,
    GuestResponse,
    GuestStatusUpdate,
    SongCreate,
    SongResponse,
    TaskCreate,
    TaskResponse,
)
from src.planning.service import PlanningService
from src.storage.database.models import Wedding

router = APIRouter(prefix="/weddings/{wedding_id}", tags=["planning"])


@router.post("/guests", response_model=GuestResponse, status_code=201)
async def add_guest(
    guest_data: GuestCreate,
    wedding: Wedding = Depends(get_wedding),
    service: PlanningService = Depends(get_planning_service),
) -> Any:
    """Add a guest."""
    return await service.add_guest(
        wedding.id,
        name=guest_data.name,
        status=guest_data.status,
        table_number=guest_data.table_number,
    )


@router.patch("/guests/{guest_id}/status", response_model=GuestResponse)
async def update_guest_status(
    guest_id: int,
    status_data: GuestStatusUpdate,
    wedding: Wedding = Depends(get_wedding),
    service: PlanningService = Depends(get_planning_service),
) -> Any:
    """Record a guest's RSVP."""
    return await service.update_guest_status(wedding.id, guest_id, status_data.status)


@router.post("/tasks", response_model=TaskResponse, status_code=201)
async def add_task(
    task_data: TaskCreate,
    wedding: Wedding = Depends(get_wedding),
    service: PlanningService = Depends(get_planning_service),
) -> Any:
    """Add a planner task."""
    return await service.add_task(wedding.id, task_data.text)


@router.post("/tasks/{task_id}/complete", response_model=TaskResponse)
async def complete_task(
    task_id: int,
    wedding: Wedding = Depends(get_wedding),
    service: PlanningService = Depends(get_planning_service),
) -> Any:
    """Mark a planner task as done."""
    return await service.set_task_completed(wedding.id, task_id, completed=True)


@router.post("/budget-items", response_model=BudgetItemResponse, status_code=201)
async def add_budget_item(
    item_data: BudgetItemCreate,
    wedding: Wedding = Depends(get_wedding),
    service: PlanningService = Depends(get_planning_service),
) -> Any:
    """Add an expense to the budget."""
    return await service.add_budget_item(wedding.id, **item_data.model_dump())


@router.post("/gifts", response_model=GiftResponse, status_code=201)
async def register_gift(
    gift_data: GiftCreate,
    wedding: Wedding = Depends(get_wedding),
    service: PlanningService = Depends(get_planning_service),
) -> Any:
    """Register a received gift."""
    return await service.register_gift(wedding.id, **gift_data.model_dump())


@router.post("/songs", response_model=SongResponse, status_code=201)
async def suggest_song(
    song_data: SongCreate,
    wedding: Wedding = Depends(get_wedding),
    service: PlanningService = Depends(get_planning_service),
) -> Any:
    """Suggest a song for the playlist."""
    return await service.suggest_song(wedding.id, **song_data.model_dump())
