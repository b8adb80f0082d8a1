"""Initial BrightLight schema."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from brightlight.db.types import JSONBCompat

# revision identifiers, used by Alembic.
revision = "202406010900"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "plans",
        sa.Column("user_id", sa.String(length=128), primary_key=True, nullable=False),
        sa.Column("creation_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("plan", JSONBCompat(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "twoweek_check_records",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("gad_score", sa.Integer(), nullable=False),
        sa.Column("gad_score_level", sa.String(length=50), nullable=False),
        sa.Column("phq_score", sa.Integer(), nullable=False),
        sa.Column("phq_score_level", sa.String(length=50), nullable=False),
    )
    op.create_index(
        "ix_twoweek_check_records_user_date",
        "twoweek_check_records",
        ["user_id", "date"],
        unique=False,
    )

    op.create_table(
        "preference_scores",
        sa.Column("user_id", sa.String(length=128), primary_key=True, nullable=False),
        sa.Column("scores", JSONBCompat(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "daily_emotions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("emotions", JSONBCompat(), nullable=False),
        sa.Column("emotions_values", JSONBCompat(), nullable=False),
        sa.Column("summary", sa.Text(), nullable=False),
        sa.Column("greeting_texts", JSONBCompat(), nullable=False),
    )
    op.create_index("ix_daily_emotions_user_date", "daily_emotions", ["user_id", "date"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_daily_emotions_user_date", table_name="daily_emotions")
    op.drop_table("daily_emotions")

    op.drop_table("preference_scores")

    op.drop_index("ix_twoweek_check_records_user_date", table_name="twoweek_check_records")
    op.drop_table("twoweek_check_records")

    op.drop_table("plans")
