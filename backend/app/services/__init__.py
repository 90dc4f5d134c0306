"""Journal services: entry lifecycle, aggregation and notifications."""

from app.services.monthly_reports import monthly_aggregator
from app.services.notifications import notifier
from app.services.weekly_summaries import weekly_aggregator

__all__ = ["monthly_aggregator", "notifier", "weekly_aggregator"]
