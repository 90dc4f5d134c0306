"""Weekly summary schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import ConfigDict

from app.schemas.base import BaseSchema


class WeeklySummaryRead(BaseSchema):
    """Schema for reading a weekly summary."""

    # summary_text is returned byte-for-byte, trailing blank line included
    model_config = ConfigDict(str_strip_whitespace=False)

    id: UUID
    user_id: UUID
    week_start: date
    week_end: date
    summary_text: str
    generated_at: datetime
