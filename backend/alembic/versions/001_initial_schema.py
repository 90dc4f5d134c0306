"""Initial journal schema.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

Creates:
- users, auth_identities
- daily_entries: one entry per user per date
- weekly_summaries: one summary per user per (week_start, week_end)
- monthly_reports: one report per user per (month, year), report_data as JSONB
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ==========================================================================
    # USERS / AUTH
    # ==========================================================================
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "auth_identities",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("provider", sa.String(50), nullable=False),
        sa.Column("provider_user_id", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("provider", "provider_user_id", name="unique_provider_identity"),
    )
    op.create_index("ix_auth_identities_user_id", "auth_identities", ["user_id"])
    op.create_index(
        "idx_auth_identities_provider_lookup",
        "auth_identities",
        ["provider", "provider_user_id"],
    )

    # ==========================================================================
    # DAILY ENTRIES
    # ==========================================================================
    op.create_table(
        "daily_entries",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("entry_date", sa.Date(), nullable=False),
        sa.Column("yesterday_work", sa.Text(), nullable=True),
        sa.Column("today_plan", sa.Text(), nullable=True),
        sa.Column("blockers", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("user_id", "entry_date", name="unique_user_entry_date"),
    )
    op.create_index("idx_daily_entries_user_date", "daily_entries", ["user_id", "entry_date"])

    # ==========================================================================
    # WEEKLY SUMMARIES
    # ==========================================================================
    op.create_table(
        "weekly_summaries",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("week_start", sa.Date(), nullable=False),
        sa.Column("week_end", sa.Date(), nullable=False),
        sa.Column("summary_text", sa.Text(), nullable=False),
        sa.Column("generated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("user_id", "week_start", "week_end", name="unique_user_week_summary"),
        sa.CheckConstraint("week_end >= week_start", name="valid_week_window"),
    )
    op.create_index("idx_weekly_summaries_user_week", "weekly_summaries", ["user_id", "week_start"])

    # ==========================================================================
    # MONTHLY REPORTS
    # ==========================================================================
    op.create_table(
        "monthly_reports",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column(
            "report_data",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=False,
        ),
        sa.Column("generated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("user_id", "month", "year", name="unique_user_month_report"),
        sa.CheckConstraint("month >= 1 AND month <= 12", name="valid_month"),
    )
    op.create_index("idx_monthly_reports_user_period", "monthly_reports", ["user_id", "year", "month"])


def downgrade() -> None:
    op.drop_index("idx_monthly_reports_user_period", table_name="monthly_reports")
    op.drop_table("monthly_reports")
    op.drop_index("idx_weekly_summaries_user_week", table_name="weekly_summaries")
    op.drop_table("weekly_summaries")
    op.drop_index("idx_daily_entries_user_date", table_name="daily_entries")
    op.drop_table("daily_entries")
    op.drop_index("idx_auth_identities_provider_lookup", table_name="auth_identities")
    op.drop_index("ix_auth_identities_user_id", table_name="auth_identities")
    op.drop_table("auth_identities")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
