"""create response library tables

Revision ID: 1a2b3c4d5e6f
Revises:
Create Date: 2026-10-19 09:00:00.000000+00:00

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "1a2b3c4d5e6f"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _timestamp(name: str) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    op.create_table(
        "responses",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("question_text", sa.Text(), nullable=False),
        sa.Column("question_type", sa.String(length=20), nullable=False),
        sa.Column("question_category", sa.String(length=100), nullable=True),
        sa.Column("current_response", sa.Text(), nullable=False),
        sa.Column("current_version_id", sa.Uuid(), nullable=True),
        sa.Column("is_favorite", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("practice_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("success_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_uses", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("success_rate", sa.Float(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_responses_user_id", "responses", ["user_id"])
    op.create_index("ix_responses_question_type", "responses", ["question_type"])
    op.create_index("ix_responses_question_category", "responses", ["question_category"])

    op.create_table(
        "response_versions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("response_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("version_number", sa.Integer(), nullable=False),
        sa.Column("response_text", sa.Text(), nullable=False),
        sa.Column("ai_feedback", JSON_TYPE, nullable=True),
        sa.Column("word_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("estimated_duration", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=True),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(["response_id"], ["responses.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("response_id", "version_number", name="uq_response_versions_response_number"),
    )
    op.create_index("ix_response_versions_response_id", "response_versions", ["response_id"])
    op.create_index(
        "idx_response_versions_response_number", "response_versions", ["response_id", "version_number"]
    )

    op.create_table(
        "response_tags",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("response_id", sa.Uuid(), nullable=False),
        sa.Column("tag_type", sa.String(length=50), nullable=False),
        sa.Column("tag_value", sa.String(length=255), nullable=False),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(["response_id"], ["responses.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_response_tags_response_id", "response_tags", ["response_id"])
    op.create_index("ix_response_tags_tag_value", "response_tags", ["tag_value"])

    op.create_table(
        "response_outcomes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("response_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("job_id", sa.Uuid(), nullable=True),
        sa.Column("interview_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("company", sa.String(length=255), nullable=True),
        sa.Column("position", sa.String(length=255), nullable=True),
        sa.Column("outcome", sa.String(length=20), nullable=False),
        sa.Column("interviewer_reaction", sa.String(length=20), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(["response_id"], ["responses.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_response_outcomes_response_id", "response_outcomes", ["response_id"])

    op.create_table(
        "response_practice_sessions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("response_id", sa.Uuid(), nullable=False),
        sa.Column("practice_text", sa.Text(), nullable=False),
        sa.Column("delivery_time", sa.Integer(), nullable=True),
        sa.Column("ai_score", sa.Float(), nullable=False),
        sa.Column("ai_feedback", JSON_TYPE, nullable=True),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(["response_id"], ["responses.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_response_practice_sessions_user_id", "response_practice_sessions", ["user_id"])
    op.create_index("ix_response_practice_sessions_response_id", "response_practice_sessions", ["response_id"])

    # jobs is owned by the job tracker; created here only if this database has none
    bind = op.get_bind()
    if not sa.inspect(bind).has_table("jobs"):
        op.create_table(
            "jobs",
            sa.Column("id", sa.Uuid(), nullable=False),
            sa.Column("user_id", sa.String(length=255), nullable=False),
            sa.Column("title", sa.String(length=255), nullable=False),
            sa.Column("company", sa.String(length=255), nullable=True),
            sa.Column("description", sa.Text(), nullable=True),
            _timestamp("created_at"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_jobs_user_id", "jobs", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_response_practice_sessions_response_id", table_name="response_practice_sessions")
    op.drop_index("ix_response_practice_sessions_user_id", table_name="response_practice_sessions")
    op.drop_table("response_practice_sessions")
    op.drop_index("ix_response_outcomes_response_id", table_name="response_outcomes")
    op.drop_table("response_outcomes")
    op.drop_index("ix_response_tags_tag_value", table_name="response_tags")
    op.drop_index("ix_response_tags_response_id", table_name="response_tags")
    op.drop_table("response_tags")
    op.drop_index("idx_response_versions_response_number", table_name="response_versions")
    op.drop_index("ix_response_versions_response_id", table_name="response_versions")
    op.drop_table("response_versions")
    op.drop_index("ix_responses_question_category", table_name="responses")
    op.drop_index("ix_responses_question_type", table_name="responses")
    op.drop_index("ix_responses_user_id", table_name="responses")
    op.drop_table("responses")
