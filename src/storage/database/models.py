"""SQLAlchemy models for weddings and their planning data."""

import datetime
import enum
import uuid
from typing import Optional

from sqlalchemy import Boolean, DateTime, Enum, Float, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from src.storage.database.base import Base, TimestampMixin


class GuestStatus(str, enum.Enum):
    """RSVP status of a guest."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    DECLINED = "declined"


class Wedding(Base):
    """Tenant: every other entity is scoped under one wedding."""

    __tablename__ = "weddings"

    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, default=lambda: uuid.uuid4().hex
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<Wedding(id='{self.id}', name='{self.name}')>"


class Guest(Base, TimestampMixin):
    """Wedding guest."""

    __tablename__ = "guests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    wedding_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("weddings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[GuestStatus] = mapped_column(
        Enum(GuestStatus), default=GuestStatus.PENDING, nullable=False
    )
    table_number: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    def __repr__(self) -> str:
        return f"<Guest(name='{self.name}', status='{self.status}')>"


class Task(Base, TimestampMixin):
    """Planner task."""

    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    wedding_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("weddings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, completed={self.completed})>"


class BudgetItem(Base, TimestampMixin):
    """Expense line in the wedding budget."""

    __tablename__ = "budget_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    wedding_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("weddings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    supplier: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    estimated_cost: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    actual_cost: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)

    def __repr__(self) -> str:
        return f"<BudgetItem(description='{self.description}')>"


class Gift(Base, TimestampMixin):
    """Gift received by the couple."""

    __tablename__ = "gifts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    wedding_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("weddings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    gift_name: Mapped[str] = mapped_column(String(255), nullable=False)
    giver_name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_anonymous: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<Gift(gift_name='{self.gift_name}')>"


class Song(Base, TimestampMixin):
    """Playlist entry suggested for the party."""

    __tablename__ = "songs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    wedding_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("weddings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    artist: Mapped[str] = mapped_column(String(255), nullable=False)
    suggested_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<Song(title='{self.title}', artist='{self.artist}')>"
