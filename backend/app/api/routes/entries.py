"""Daily entry CRUD, search and date-range filter routes."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from app.api.deps import CurrentUser, DbSession, Pagination
from app.schemas.entries import DailyEntryCreate, DailyEntryRead, DailyEntryUpdate
from app.schemas.pagination import Page
from app.services import entries as entry_service

router = APIRouter(prefix="/entries", tags=["entries"])


def _page(items, total: int, pagination) -> Page[DailyEntryRead]:
    return Page[DailyEntryRead](
        items=[DailyEntryRead.model_validate(e) for e in items],
        total=total,
        page=pagination.page,
        size=pagination.size,
    )


@router.get("/", response_model=Page[DailyEntryRead])
async def list_entries(
    current_user: CurrentUser,
    db: DbSession,
    pagination: Pagination,
) -> Page[DailyEntryRead]:
    """List the current user's entries, newest date first."""
    items, total = await entry_service.list_entries(db, current_user.id, pagination)
    return _page(items, total, pagination)


@router.post(
    "/",
    response_model=DailyEntryRead,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "An entry for this date already exists."}},
)
async def create_entry(
    data: DailyEntryCreate,
    current_user: CurrentUser,
    db: DbSession,
) -> DailyEntryRead:
    """Create the entry for a date. One entry per user per date."""
    entry = await entry_service.create_entry(db, current_user.id, data)
    return DailyEntryRead.model_validate(entry)


@router.get("/search", response_model=Page[DailyEntryRead])
async def search_entries(
    current_user: CurrentUser,
    db: DbSession,
    pagination: Pagination,
    query: Annotated[str, Query(max_length=500, description="Case-insensitive substring.")] = "",
) -> Page[DailyEntryRead]:
    """
    Search yesterday_work, today_plan and blockers.

    An empty query returns every entry.
    """
    items, total = await entry_service.search_entries(db, current_user.id, query, pagination)
    return _page(items, total, pagination)


@router.get("/filter", response_model=Page[DailyEntryRead])
async def filter_entries(
    current_user: CurrentUser,
    db: DbSession,
    pagination: Pagination,
    start_date: date,
    end_date: date,
) -> Page[DailyEntryRead]:
    """List entries dated within [start_date, end_date], inclusive."""
    items, total = await entry_service.filter_entries(
        db, current_user.id, start_date, end_date, pagination
    )
    return _page(items, total, pagination)


@router.get("/{entry_id}", response_model=DailyEntryRead)
async def get_entry(
    entry_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> DailyEntryRead:
    """Get a specific entry by ID."""
    entry = await entry_service.get_entry(db, entry_id, current_user.id)
    return DailyEntryRead.model_validate(entry)


@router.put("/{entry_id}", response_model=DailyEntryRead)
async def update_entry(
    entry_id: UUID,
    data: DailyEntryUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> DailyEntryRead:
    """Update an entry's text fields."""
    entry = await entry_service.update_entry(db, entry_id, current_user.id, data)
    return DailyEntryRead.model_validate(entry)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(
    entry_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> None:
    """Delete an entry."""
    await entry_service.delete_entry(db, entry_id, current_user.id)
