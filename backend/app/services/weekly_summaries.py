"""Weekly summary generation from daily entries."""

import logging
from collections.abc import Iterable
from datetime import date, datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.db.models import DailyEntry, WeeklySummary
from app.errors import ValidationError
from app.schemas.pagination import PageParams
from app.services.artifacts import save_generated

logger = logging.getLogger(__name__)
settings = get_settings()

WEEK_LENGTH_DAYS = 7
LAST_WEEK_START = date.max - timedelta(days=WEEK_LENGTH_DAYS - 1)


def week_window(week_start: date) -> tuple[date, date]:
    """
    Return (week_start, week_end) for the 7-day window starting at week_start.

    Raises ValidationError when the window would run past the last
    representable date.
    """
    if week_start > LAST_WEEK_START:
        raise ValidationError(
            f"week_start must be on or before {LAST_WEEK_START.isoformat()}.",
            details={"week_start": week_start.isoformat()},
        )
    return week_start, week_start + timedelta(days=WEEK_LENGTH_DAYS - 1)


def build_summary_text(week_start: date, week_end: date, entries: Iterable[DailyEntry]) -> str:
    """
    Render the summary text for a week.

    Entries must already be in ascending date order. Each entry yields a
    "Date:" line, a "Work Done:" line when yesterday_work is set, a
    "Blockers:" line when blockers is set, then a blank line. Days without
    an entry produce nothing.
    """
    lines = [f"Week Summary ({week_start.isoformat()} to {week_end.isoformat()}):", ""]
    for entry in entries:
        lines.append(f"Date: {entry.entry_date.isoformat()}")
        if entry.yesterday_work is not None:
            lines.append(f"Work Done: {entry.yesterday_work}")
        if entry.blockers is not None:
            lines.append(f"Blockers: {entry.blockers}")
        lines.append("")
    return "\n".join(lines) + "\n"


class WeeklyAggregator:
    """Builds and stores one WeeklySummary per owner per 7-day window."""

    def __init__(self, allow_regeneration: bool = True):
        self.allow_regeneration = allow_regeneration

    async def _entries_in_window(
        self, db: AsyncSession, owner_id: UUID, week_start: date, week_end: date
    ) -> list[DailyEntry]:
        result = await db.execute(
            select(DailyEntry)
            .where(
                DailyEntry.user_id == owner_id,
                DailyEntry.entry_date >= week_start,
                DailyEntry.entry_date <= week_end,
            )
            .order_by(DailyEntry.entry_date.asc())
        )
        return list(result.scalars())

    async def _find(
        self, db: AsyncSession, owner_id: UUID, week_start: date, week_end: date
    ) -> WeeklySummary | None:
        result = await db.execute(
            select(WeeklySummary).where(
                WeeklySummary.user_id == owner_id,
                WeeklySummary.week_start == week_start,
                WeeklySummary.week_end == week_end,
            )
        )
        return result.scalar_one_or_none()

    async def generate(self, db: AsyncSession, owner_id: UUID, week_start: date) -> WeeklySummary:
        """
        Generate the summary for [week_start, week_start + 6 days].

        week_start need not be a Monday. An existing summary for the same
        window is overwritten, or rejected with ConflictError when
        regeneration is disabled.
        """
        week_start, week_end = week_window(week_start)
        entries = await self._entries_in_window(db, owner_id, week_start, week_end)
        text = build_summary_text(week_start, week_end, entries)
        generated_at = datetime.now(timezone.utc)

        def apply(summary: WeeklySummary) -> None:
            summary.summary_text = text
            summary.generated_at = generated_at

        return await save_generated(
            db,
            find=lambda: self._find(db, owner_id, week_start, week_end),
            build=lambda: WeeklySummary(
                user_id=owner_id,
                week_start=week_start,
                week_end=week_end,
                summary_text=text,
                generated_at=generated_at,
            ),
            apply=apply,
            allow_regeneration=self.allow_regeneration,
            label=f"Weekly summary for {week_start.isoformat()} to {week_end.isoformat()}",
            details={"week_start": week_start.isoformat(), "week_end": week_end.isoformat()},
        )

    async def list_summaries(
        self, db: AsyncSession, owner_id: UUID, params: PageParams
    ) -> tuple[list[WeeklySummary], int]:
        """Summaries for the owner, newest week first."""
        query = select(WeeklySummary).where(WeeklySummary.user_id == owner_id)
        total = await db.scalar(select(func.count()).select_from(query.subquery()))
        result = await db.execute(
            query.order_by(WeeklySummary.week_start.desc()).offset(params.offset).limit(params.size)
        )
        return list(result.scalars()), total or 0


weekly_aggregator = WeeklyAggregator(allow_regeneration=settings.allow_regeneration)
