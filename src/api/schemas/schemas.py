"""Pydantic schemas for weddings and planning operations."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.storage.database.models import GuestStatus


class WeddingCreate(BaseModel):
    """Wedding creation request."""

    name: str = Field(..., min_length=1, max_length=255)
    id: Optional[str] = Field(default=None, min_length=1, max_length=64)


class WeddingResponse(BaseModel):
    """Wedding response."""

    id: str
    name: str
    created_at: datetime

    model_config = {"from_attributes": True}


class GuestCreate(BaseModel):
    """Guest creation request."""

    name: str = Field(..., min_length=1, max_length=255)
    status: GuestStatus = GuestStatus.PENDING
    table_number: Optional[int] = None


class GuestStatusUpdate(BaseModel):
    """Guest RSVP change."""

    status: GuestStatus


class GuestResponse(BaseModel):
    """Guest response."""

    id: int
    wedding_id: str
    name: str
    status: GuestStatus
    table_number: Optional[int]

    model_config = {"from_attributes": True}


class TaskCreate(BaseModel):
    """Task creation request."""

    text: str = Field(..., min_length=1)


class TaskResponse(BaseModel):
    """Task response."""

    id: int
    wedding_id: str
    text: str
    completed: bool

    model_config = {"from_attributes": True}


class BudgetItemCreate(BaseModel):
    """Budget item creation request."""

    description: str = Field(..., min_length=1, max_length=500)
    supplier: Optional[str] = None
    estimated_cost: float = Field(default=0.0, ge=0)
    actual_cost: float = Field(default=0.0, ge=0)


class BudgetItemResponse(BaseModel):
    """Budget item response."""

    id: int
    wedding_id: str
    description: str
    supplier: Optional[str]
    estimated_cost: float
    actual_cost: float

    model_config = {"from_attributes": True}


class GiftCreate(BaseModel):
    """Gift registration request."""

    gift_name: str = Field(..., min_length=1, max_length=255)
    giver_name: str = Field(..., min_length=1, max_length=255)
    is_anonymous: bool = False


class GiftResponse(BaseModel):
    """Gift response."""

    id: int
    wedding_id: str
    gift_name: str
    giver_name: str
    is_anonymous: bool

    model_config = {"from_attributes": True}


class SongCreate(BaseModel):
    """Song suggestion request."""

    title: str = Field(..., min_length=1, max_length=255)
    artist: str = Field(..., min_length=1, max_length=255)
    suggested_by: Optional[str] = None


class SongResponse(BaseModel):
    """Song response."""

    id: int
    wedding_id: str
    title: str
    artist: str
    suggested_by: Optional[str]

    model_config = {"from_attributes": True}
