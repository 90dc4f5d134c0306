"""Monthly report schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.schemas.base import BaseSchema


class WeekRollup(BaseSchema):
    """One weekly summary as carried inside a monthly report."""

    model_config = ConfigDict(str_strip_whitespace=False)

    week_start: date
    week_end: date
    summary: str


class ReportData(BaseSchema):
    """The structured body of a monthly report."""

    month: int = Field(..., ge=1, le=12)
    year: int
    total_weeks: int = Field(..., ge=0)
    weekly_summaries: list[WeekRollup] = Field(default_factory=list)


class MonthlyReportRead(BaseSchema):
    """Schema for reading a monthly report."""

    id: UUID
    user_id: UUID
    month: int
    year: int
    report_data: ReportData
    generated_at: datetime


class _ExportSchema(BaseSchema):
    """Serializes field names in camelCase for the exported document."""

    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=False,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ExportedWeek(_ExportSchema):
    week_start: date
    week_end: date
    summary: str


class ReportExport(_ExportSchema):
    """
    Downloadable report document.

    Keys are camelCase (totalWeeks, weeklySummaries, weekStart, weekEnd) so
    the file matches the report format other clients already consume. The
    stored report_data and the JSON API keep snake_case.
    """

    month: int
    year: int
    total_weeks: int
    weekly_summaries: list[ExportedWeek] = Field(default_factory=list)
