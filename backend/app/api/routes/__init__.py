"""API routes package."""

from app.api.routes import (
    auth,
    entries,
    health,
    monthly_reports,
    weekly_summaries,
)

__all__ = [
    "auth",
    "entries",
    "health",
    "monthly_reports",
    "weekly_summaries",
]
