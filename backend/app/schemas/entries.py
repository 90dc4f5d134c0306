"""Daily entry schemas."""

from datetime import date, datetime
from uuid import UUID

from app.schemas.base import BaseSchema


class DailyEntryBase(BaseSchema):
    """Text fields of a standup entry. All optional."""

    yesterday_work: str | None = None
    today_plan: str | None = None
    blockers: str | None = None


class DailyEntryCreate(DailyEntryBase):
    """Schema for creating an entry. One entry per user per date."""

    entry_date: date


class DailyEntryUpdate(DailyEntryBase):
    """Schema for updating an entry.

    Only fields present in the request are applied; an explicit null clears
    the field. The entry date cannot be changed.
    """


class DailyEntryRead(DailyEntryBase):
    """Schema for reading entry data."""

    id: UUID
    user_id: UUID
    entry_date: date
    created_at: datetime
    updated_at: datetime
