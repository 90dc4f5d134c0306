"""
Monthly report generation.

A monthly report is a roll-up of the weekly summaries whose week_start falls
inside the calendar month. It never reads daily entries: the weekly text is
copied as stored.
"""

import calendar
import logging
from datetime import date, datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.db.models import MonthlyReport, WeeklySummary
from app.errors import ValidationError
from app.schemas.pagination import PageParams
from app.services.artifacts import save_generated

logger = logging.getLogger(__name__)
settings = get_settings()


def month_bounds(month: int, year: int) -> tuple[date, date]:
    """First and last day of the month. Raises ValidationError when out of range."""
    if not 1 <= month <= 12:
        raise ValidationError(
            f"Month must be between 1 and 12, got {month}.",
            details={"month": month},
        )
    if not 1 <= year <= 9999:
        raise ValidationError(
            f"Year must be between 1 and 9999, got {year}.",
            details={"year": year},
        )
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def build_report_data(month: int, year: int, summaries: list[WeeklySummary]) -> dict[str, Any]:
    """JSON-ready report body; summaries must be in ascending week_start order."""
    return {
        "month": month,
        "year": year,
        "total_weeks": len(summaries),
        "weekly_summaries": [
            {
                "week_start": s.week_start.isoformat(),
                "week_end": s.week_end.isoformat(),
                "summary": s.summary_text,
            }
            for s in summaries
        ],
    }


def render_report_text(report_data: dict[str, Any]) -> str:
    """Plain-text rendering of a report, used for notifications."""
    header = (
        f"Monthly Report ({report_data['year']:04d}-{report_data['month']:02d}): "
        f"{report_data['total_weeks']} week(s)"
    )
    parts = [header, ""]
    for week in report_data["weekly_summaries"]:
        parts.append(f"Week {week['week_start']} to {week['week_end']}")
        parts.append(week["summary"])
    return "\n".join(parts)


class MonthlyAggregator:
    """Builds and stores one MonthlyReport per owner per calendar month."""

    def __init__(self, allow_regeneration: bool = True):
        self.allow_regeneration = allow_regeneration

    async def _summaries_in_month(
        self, db: AsyncSession, owner_id: UUID, month_start: date, month_end: date
    ) -> list[WeeklySummary]:
        result = await db.execute(
            select(WeeklySummary)
            .where(
                WeeklySummary.user_id == owner_id,
                WeeklySummary.week_start >= month_start,
                WeeklySummary.week_start <= month_end,
            )
            .order_by(WeeklySummary.week_start.asc())
        )
        return list(result.scalars())

    async def _find(
        self, db: AsyncSession, owner_id: UUID, month: int, year: int
    ) -> MonthlyReport | None:
        result = await db.execute(
            select(MonthlyReport).where(
                MonthlyReport.user_id == owner_id,
                MonthlyReport.month == month,
                MonthlyReport.year == year,
            )
        )
        return result.scalar_one_or_none()

    async def generate(self, db: AsyncSession, owner_id: UUID, month: int, year: int) -> MonthlyReport:
        """
        Generate the report for (month, year).

        A month with no weekly summaries still produces a report, with
        total_weeks 0.
        """
        month_start, month_end = month_bounds(month, year)
        summaries = await self._summaries_in_month(db, owner_id, month_start, month_end)
        report_data = build_report_data(month, year, summaries)
        generated_at = datetime.now(timezone.utc)

        def apply(report: MonthlyReport) -> None:
            report.report_data = report_data
            report.generated_at = generated_at

        return await save_generated(
            db,
            find=lambda: self._find(db, owner_id, month, year),
            build=lambda: MonthlyReport(
                user_id=owner_id,
                month=month,
                year=year,
                report_data=report_data,
                generated_at=generated_at,
            ),
            apply=apply,
            allow_regeneration=self.allow_regeneration,
            label=f"Monthly report for {year:04d}-{month:02d}",
            details={"month": month, "year": year},
        )

    async def list_reports(
        self, db: AsyncSession, owner_id: UUID, params: PageParams
    ) -> tuple[list[MonthlyReport], int]:
        """Reports for the owner, most recent month first."""
        query = select(MonthlyReport).where(MonthlyReport.user_id == owner_id)
        total = await db.scalar(select(func.count()).select_from(query.subquery()))
        result = await db.execute(
            query.order_by(MonthlyReport.year.desc(), MonthlyReport.month.desc())
            .offset(params.offset)
            .limit(params.size)
        )
        return list(result.scalars()), total or 0


monthly_aggregator = MonthlyAggregator(allow_regeneration=settings.allow_regeneration)
