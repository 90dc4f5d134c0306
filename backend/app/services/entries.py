"""
Daily entry lifecycle: create, read, update, delete, search and filter.

Every function takes the resolved owner_id explicitly. Fetch-by-id paths go
through get_owned_resource so a missing id is NotFound and a foreign id is
AccessDenied, both before any field is touched.
"""

import logging
from datetime import date, datetime, timezone
from uuid import UUID

from sqlalchemy import Select, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_owned_resource
from app.db.models import DailyEntry
from app.errors import ConflictError, ValidationError
from app.schemas.entries import DailyEntryCreate, DailyEntryUpdate
from app.schemas.pagination import PageParams

logger = logging.getLogger(__name__)

_SEARCHABLE_COLUMNS = (DailyEntry.yesterday_work, DailyEntry.today_plan, DailyEntry.blockers)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def _paginate(
    db: AsyncSession, query: Select, params: PageParams
) -> tuple[list[DailyEntry], int]:
    total = await db.scalar(select(func.count()).select_from(query.subquery()))
    result = await db.execute(
        query.order_by(DailyEntry.entry_date.desc()).offset(params.offset).limit(params.size)
    )
    return list(result.scalars()), total or 0


def _owned(owner_id: UUID) -> Select:
    return select(DailyEntry).where(DailyEntry.user_id == owner_id)


async def list_entries(
    db: AsyncSession, owner_id: UUID, params: PageParams
) -> tuple[list[DailyEntry], int]:
    """Entries for the owner, newest entry_date first."""
    return await _paginate(db, _owned(owner_id), params)


async def create_entry(db: AsyncSession, owner_id: UUID, data: DailyEntryCreate) -> DailyEntry:
    """
    Create an entry for the owner.

    The (user_id, entry_date) unique constraint is the only duplicate check,
    so two concurrent creates for the same day resolve to one success and
    one ConflictError.
    """
    now = datetime.now(timezone.utc)
    entry = DailyEntry(
        user_id=owner_id,
        **data.model_dump(),
        created_at=now,
        updated_at=now,
    )
    db.add(entry)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(
            f"An entry for {data.entry_date} already exists.",
            details={"entry_date": data.entry_date.isoformat()},
        )
    await db.commit()
    await db.refresh(entry)
    logger.info("Created entry %s for %s on %s", entry.id, owner_id, entry.entry_date)
    return entry


async def get_entry(db: AsyncSession, entry_id: UUID, owner_id: UUID) -> DailyEntry:
    return await get_owned_resource(db, DailyEntry, entry_id, owner_id, resource_name="Entry")


async def update_entry(
    db: AsyncSession, entry_id: UUID, owner_id: UUID, data: DailyEntryUpdate
) -> DailyEntry:
    """Apply the text fields present in `data` and bump updated_at."""
    entry = await get_owned_resource(db, DailyEntry, entry_id, owner_id, resource_name="Entry")
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(entry, key, value)
    entry.updated_at = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(entry)
    return entry


async def delete_entry(db: AsyncSession, entry_id: UUID, owner_id: UUID) -> None:
    entry = await get_owned_resource(db, DailyEntry, entry_id, owner_id, resource_name="Entry")
    await db.delete(entry)
    await db.commit()
    logger.info("Deleted entry %s for %s", entry_id, owner_id)


async def search_entries(
    db: AsyncSession, owner_id: UUID, query: str, params: PageParams
) -> tuple[list[DailyEntry], int]:
    """
    Case-insensitive substring search over the three text fields (OR).

    An empty or blank query matches every entry of the owner. Any other
    query is matched as given, surrounding whitespace included, and LIKE
    wildcards in it are matched literally.
    """
    stmt = _owned(owner_id)
    if query.strip():
        pattern = f"%{_escape_like(query)}%"
        stmt = stmt.where(or_(*(col.ilike(pattern, escape="\\") for col in _SEARCHABLE_COLUMNS)))
    return await _paginate(db, stmt, params)


async def filter_entries(
    db: AsyncSession,
    owner_id: UUID,
    start_date: date,
    end_date: date,
    params: PageParams,
) -> tuple[list[DailyEntry], int]:
    """Entries with entry_date in [start_date, end_date], newest first."""
    if start_date > end_date:
        raise ValidationError(
            "start_date must be on or before end_date.",
            details={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
        )
    stmt = _owned(owner_id).where(
        DailyEntry.entry_date >= start_date,
        DailyEntry.entry_date <= end_date,
    )
    return await _paginate(db, stmt, params)
