"""Database repository layer for weddings and planning data."""

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import ValidationException
from src.core.logging import get_logger
from src.storage.database.models import BudgetItem, Gift, Guest, Song, Task, Wedding

logger = get_logger(__name__)


def require_wedding_id(wedding_id: Optional[str]) -> str:
    """Reject empty tenant identifiers before any query runs."""
    if not wedding_id or not str(wedding_id).strip():
        raise ValidationException("wedding_id must be a non-empty string")
    return wedding_id


class WeddingRepository:
    """Repository for Wedding model."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session."""
        self.session = session

    async def create(self, name: str, wedding_id: Optional[str] = None) -> Wedding:
        """Create new wedding."""
        if not name or not name.strip():
            raise ValidationException("Wedding name is required")
        wedding = Wedding(name=name.strip())
        if wedding_id is not None:
            wedding.id = require_wedding_id(wedding_id)
        self.session.add(wedding)
        await self.session.flush()
        await self.session.refresh(wedding)
        logger.info("wedding_created", wedding_id=wedding.id)
        return wedding

    async def get_by_id(self, wedding_id: str) -> Optional[Wedding]:
        """Get wedding by ID."""
        result = await self.session.execute(select(Wedding).where(Wedding.id == wedding_id))
        return result.scalar_one_or_none()


class GuestRepository:
    """Repository for Guest model."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session."""
        self.session = session

    async def create(self, wedding_id: str, **kwargs: Any) -> Guest:
        """Create new guest."""
        guest = Guest(wedding_id=require_wedding_id(wedding_id), **kwargs)
        self.session.add(guest)
        await self.session.flush()
        await self.session.refresh(guest)
        return guest

    async def get_by_id(self, wedding_id: str, guest_id: int) -> Optional[Guest]:
        """Get guest by ID within a wedding."""
        result = await self.session.execute(
            select(Guest).where((Guest.id == guest_id) & (Guest.wedding_id == wedding_id))
        )
        return result.scalar_one_or_none()

    async def update(self, guest: Guest, **kwargs: Any) -> Guest:
        """Update guest."""
        for key, value in kwargs.items():
            setattr(guest, key, value)
        await self.session.flush()
        await self.session.refresh(guest)
        return guest


class TaskRepository:
    """Repository for Task model."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session."""
        self.session = session

    async def create(self, wedding_id: str, text: str) -> Task:
        """Create new task."""
        task = Task(wedding_id=require_wedding_id(wedding_id), text=text)
        self.session.add(task)
        await self.session.flush()
        await self.session.refresh(task)
        return task

    async def get_by_id(self, wedding_id: str, task_id: int) -> Optional[Task]:
        """Get task by ID within a wedding."""
        result = await self.session.execute(
            select(Task).where((Task.id == task_id) & (Task.wedding_id == wedding_id))
        )
        return result.scalar_one_or_none()

    async def update(self, task: Task, **kwargs: Any) -> Task:
        """Update task."""
        for key, value in kwargs.items():
            setattr(task, key, value)
        await self.session.flush()
        await self.session.refresh(task)
        return task


class BudgetItemRepository:
    """Repository for BudgetItem model."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session."""
        self.session = session

    async def create(self, wedding_id: str, **kwargs: Any) -> BudgetItem:
        """Create new budget item."""
        item = BudgetItem(wedding_id=require_wedding_id(wedding_id), **kwargs)
        self.session.add(item)
        await self.session.flush()
        await self.session.refresh(item)
        return item


class GiftRepository:
    """Repository for Gift model."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session."""
        self.session = session

    async def create(self, wedding_id: str, **kwargs: Any) -> Gift:
        """Create new gift."""
        gift = Gift(wedding_id=require_wedding_id(wedding_id), **kwargs)
        self.session.add(gift)
        await self.session.flush()
        await self.session.refresh(gift)
        return gift


class SongRepository:
    """Repository for Song model."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session."""
        self.session = session

    async def create(self, wedding_id: str, **kwargs: Any) -> Song:
        """Create new song suggestion."""
        song = Song(wedding_id=require_wedding_id(wedding_id), **kwargs)
        self.session.add(song)
        await self.session.flush()
        await self.session.refresh(song)
        return song
