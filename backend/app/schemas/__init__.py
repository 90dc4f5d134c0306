"""Pydantic schemas for API request/response validation."""

from app.schemas.auth import GoogleAuthRequest, TokenResponse
from app.schemas.entries import DailyEntryCreate, DailyEntryRead, DailyEntryUpdate
from app.schemas.pagination import Page, PageParams
from app.schemas.reports import MonthlyReportRead, ReportData, ReportExport, WeekRollup
from app.schemas.summaries import WeeklySummaryRead
from app.schemas.user import UserRead

__all__ = [
    # User / Auth
    "UserRead",
    "GoogleAuthRequest",
    "TokenResponse",
    # Pagination
    "Page",
    "PageParams",
    # Entries
    "DailyEntryCreate",
    "DailyEntryRead",
    "DailyEntryUpdate",
    # Summaries / Reports
    "WeeklySummaryRead",
    "MonthlyReportRead",
    "ReportData",
    "ReportExport",
    "WeekRollup",
]
