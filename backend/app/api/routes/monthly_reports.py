"""Monthly report routes."""

from uuid import UUID

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.api.deps import CurrentUser, DbSession, Pagination, get_owned_resource
from app.db.models import MonthlyReport
from app.schemas.pagination import Page
from app.schemas.reports import MonthlyReportRead, ReportExport
from app.services import monthly_aggregator, notifier
from app.services.monthly_reports import render_report_text

router = APIRouter(prefix="/reports/monthly", tags=["monthly-reports"])


@router.get("/", response_model=Page[MonthlyReportRead])
async def list_monthly_reports(
    current_user: CurrentUser,
    db: DbSession,
    pagination: Pagination,
) -> Page[MonthlyReportRead]:
    """List the current user's monthly reports, most recent month first."""
    items, total = await monthly_aggregator.list_reports(db, current_user.id, pagination)
    return Page[MonthlyReportRead](
        items=[MonthlyReportRead.model_validate(r) for r in items],
        total=total,
        page=pagination.page,
        size=pagination.size,
    )


@router.post(
    "/generate",
    response_model=MonthlyReportRead,
    responses={
        409: {"description": "Report exists and regeneration is disabled."},
        422: {"description": "Month outside 1-12."},
    },
)
async def generate_monthly_report(
    month: int,
    year: int,
    current_user: CurrentUser,
    db: DbSession,
) -> MonthlyReportRead:
    """Roll up the weekly summaries that start within the month."""
    owner_id, recipient = current_user.id, notifier.address_of(current_user)
    report = await monthly_aggregator.generate(db, owner_id, month, year)
    notifier.monthly_report_ready(recipient, render_report_text(report.report_data))
    return MonthlyReportRead.model_validate(report)


@router.get("/{report_id}/export")
async def export_monthly_report(
    report_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> JSONResponse:
    """Download the report body as a camelCase JSON attachment."""
    report = await get_owned_resource(
        db, MonthlyReport, report_id, current_user.id, resource_name="Monthly report"
    )
    body = ReportExport.model_validate(report.report_data)
    return JSONResponse(
        content=body.model_dump(mode="json", by_alias=True),
        headers={"Content-Disposition": f"attachment; filename=monthly-report-{report.id}.json"},
    )
