"""Weekly summary routes."""

from datetime import date

from fastapi import APIRouter

from app.api.deps import CurrentUser, DbSession, Pagination
from app.schemas.pagination import Page
from app.schemas.summaries import WeeklySummaryRead
from app.services import notifier, weekly_aggregator

router = APIRouter(prefix="/summaries/weekly", tags=["weekly-summaries"])


@router.get("/", response_model=Page[WeeklySummaryRead])
async def list_weekly_summaries(
    current_user: CurrentUser,
    db: DbSession,
    pagination: Pagination,
) -> Page[WeeklySummaryRead]:
    """List the current user's weekly summaries, newest week first."""
    items, total = await weekly_aggregator.list_summaries(db, current_user.id, pagination)
    return Page[WeeklySummaryRead](
        items=[WeeklySummaryRead.model_validate(s) for s in items],
        total=total,
        page=pagination.page,
        size=pagination.size,
    )


@router.post(
    "/generate",
    response_model=WeeklySummaryRead,
    responses={409: {"description": "Summary exists and regeneration is disabled."}},
)
async def generate_weekly_summary(
    week_start: date,
    current_user: CurrentUser,
    db: DbSession,
) -> WeeklySummaryRead:
    """
    Generate the summary for the 7 days starting at week_start.

    week_start may be any date. Generating the same week again replaces the
    stored text unless regeneration is disabled.
    """
    owner_id, recipient = current_user.id, notifier.address_of(current_user)
    summary = await weekly_aggregator.generate(db, owner_id, week_start)
    notifier.weekly_summary_ready(recipient, summary.summary_text)
    return WeeklySummaryRead.model_validate(summary)
