"""Planning operations that emit webhook events.

Every operation commits its own write first and only then hands the event to
the dispatcher, so a failing or slow endpoint can never roll back or delay
the business change.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import NotFoundException
from src.core.logging import get_logger
from src.storage.database.models import BudgetItem, Gift, Guest, GuestStatus, Song, Task
from src.storage.database.repository import (
    BudgetItemRepository,
    GiftRepository,
    GuestRepository,
    SongRepository,
    TaskRepository,
)
from src.storage.database.webhook_models import WebhookEvent
from src.webhooks.dispatcher import WebhookDispatcher

logger = get_logger(__name__)


class PlanningService:
    """Guest, planner, budget, gift and playlist writes for one session."""

    def __init__(self, session: AsyncSession, dispatcher: WebhookDispatcher) -> None:
        """Initialize service.

        Args:
            session: Database session used for the business writes
            dispatcher: Webhook dispatcher notified after each commit
        """
        self.session = session
        self.dispatcher = dispatcher

    def _emit(self, wedding_id: str, event: WebhookEvent, payload: dict) -> None:
        self.dispatcher.notify(wedding_id, event, payload)

    async def add_guest(
        self,
        wedding_id: str,
        name: str,
        status: GuestStatus = GuestStatus.PENDING,
        table_number: Optional[int] = None,
    ) -> Guest:
        """Add a guest. A guest added with an answer already counts as an RSVP."""
        guest = await GuestRepository(self.session).create(
            wedding_id, name=name, status=status, table_number=table_number
        )
        await self.session.commit()

        if guest.status != GuestStatus.PENDING:
            self._emit(
                wedding_id,
                WebhookEvent.GUEST_RSVP,
                {
                    "guestName": guest.name,
                    "status": guest.status.value,
                    "oldStatus": GuestStatus.PENDING.value,
                },
            )
        return guest

    async def update_guest_status(self, wedding_id: str, guest_id: int, status: GuestStatus) -> Guest:
        """Change a guest's RSVP. Emits only when the status actually changes."""
        repository = GuestRepository(self.session)
        guest = await repository.get_by_id(wedding_id, guest_id)
        if guest is None:
            raise NotFoundException("Guest not found")

        old_status = guest.status
        guest = await repository.update(guest, status=status)
        await self.session.commit()

        if old_status != guest.status:
            self._emit(
                wedding_id,
                WebhookEvent.GUEST_RSVP,
                {"guestName": guest.name, "status": guest.status.value, "oldStatus": old_status.value},
            )
        return guest

    async def add_task(self, wedding_id: str, text: str) -> Task:
        """Add a planner task."""
        task = await TaskRepository(self.session).create(wedding_id, text)
        await self.session.commit()
        return task

    async def set_task_completed(self, wedding_id: str, task_id: int, completed: bool = True) -> Task:
        """Mark a task done or not done. Emits when a task becomes done."""
        repository = TaskRepository(self.session)
        task = await repository.get_by_id(wedding_id, task_id)
        if task is None:
            raise NotFoundException("Task not found")

        was_completed = task.completed
        task = await repository.update(task, completed=completed)
        await self.session.commit()

        if completed and not was_completed:
            self._emit(
                wedding_id,
                WebhookEvent.TASK_COMPLETED,
                {"taskText": task.text, "completed": True},
            )
        return task

    async def add_budget_item(
        self,
        wedding_id: str,
        description: str,
        supplier: Optional[str] = None,
        estimated_cost: float = 0.0,
        actual_cost: float = 0.0,
    ) -> BudgetItem:
        """Record an expense."""
        item = await BudgetItemRepository(self.session).create(
            wedding_id,
            description=description,
            supplier=supplier,
            estimated_cost=estimated_cost,
            actual_cost=actual_cost,
        )
        await self.session.commit()

        self._emit(
            wedding_id,
            WebhookEvent.BUDGET_ITEM_ADDED,
            {
                "description": item.description,
                "supplier": item.supplier,
                "estimatedCost": item.estimated_cost,
                "actualCost": item.actual_cost,
            },
        )
        return item

    async def register_gift(
        self,
        wedding_id: str,
        gift_name: str,
        giver_name: str,
        is_anonymous: bool = False,
    ) -> Gift:
        """Log a received gift."""
        gift = await GiftRepository(self.session).create(
            wedding_id, gift_name=gift_name, giver_name=giver_name, is_anonymous=is_anonymous
        )
        await self.session.commit()

        self._emit(
            wedding_id,
            WebhookEvent.GIFT_RECEIVED,
            {"giftName": gift.gift_name, "giverName": gift.giver_name, "isAnonymous": gift.is_anonymous},
        )
        return gift

    async def suggest_song(
        self,
        wedding_id: str,
        title: str,
        artist: str,
        suggested_by: Optional[str] = None,
    ) -> Song:
        """Add a song to the collaborative playlist."""
        song = await SongRepository(self.session).create(
            wedding_id, title=title, artist=artist, suggested_by=suggested_by
        )
        await self.session.commit()
        logger.info("song_suggested", wedding_id=wedding_id, song_id=song.id)

        self._emit(
            wedding_id,
            WebhookEvent.SONG_SUGGESTED,
            {"title": song.title, "artist": song.artist, "suggestedBy": song.suggested_by},
        )
        return song
