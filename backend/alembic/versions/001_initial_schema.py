"""Initial schema

Revision ID: 001
Revises: None
Create Date: 2025-10-01 00:00:00.000000+00:00

What:  Creates every Duet table: users and pairings, the question bank,
       answers, journals and the activity tables behind streaks and the
       random sub-topic batch.

Rollback: downgrade() drops all tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

NOW = sa.text("CURRENT_TIMESTAMP")
TRUE = sa.text("true")
FALSE = sa.text("false")


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=NOW),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=NOW),
    ]


def _presentable():
    return [
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("icon", sa.String(100)),
        sa.Column("color", sa.String(50)),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=TRUE),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(100), nullable=False),
        sa.Column("transaction_id", sa.Text()),
        sa.Column("social_id", sa.Text()),
        sa.Column("name", sa.String(255)),
        sa.Column("gender", sa.String(30)),
        sa.Column("birth_date", sa.Date()),
        sa.Column("lat", sa.Numeric(10, 8)),
        sa.Column("long", sa.Numeric(11, 8)),
        sa.Column("anniversary", sa.Date()),
        sa.Column("relationship_status", sa.String(100)),
        sa.Column("expectations", sa.Text()),
        sa.Column("invite_code", sa.String(100)),
        sa.Column("profile_img", sa.Text()),
        sa.Column("mood", sa.String(100)),
        sa.Column("lang", sa.String(5), nullable=False, server_default=sa.text("'en'")),
        sa.Column("distance_unit", sa.String(10), nullable=False, server_default=sa.text("'km'")),
        sa.Column("hide_content", sa.Boolean(), nullable=False, server_default=FALSE),
        sa.Column("location_permission", sa.Boolean(), nullable=False, server_default=FALSE),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=TRUE),
        sa.Column("deleted", sa.Boolean(), nullable=False, server_default=FALSE),
        sa.Column("last_active_at", sa.DateTime(timezone=True)),
        *_timestamps(),
        sa.UniqueConstraint("uuid", name="uq_users_uuid"),
        sa.UniqueConstraint("invite_code", name="uq_users_invite_code"),
    )
    op.create_index("ix_users_social_id", "users", ["social_id"])

    op.create_table(
        "relationships",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user1_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user2_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True)),
        sa.Column("deleted", sa.Boolean(), nullable=False, server_default=FALSE),
        *_timestamps(),
    )
    op.create_index("ix_relationships_user1_id", "relationships", ["user1_id"])
    op.create_index("ix_relationships_user2_id", "relationships", ["user2_id"])

    # ── Question bank ─────────────────────────────────────────────────────
    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        *_presentable(),
        *_timestamps(),
    )
    op.create_table(
        "topics",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        *_presentable(),
        *_timestamps(),
    )
    op.create_table(
        "sub_topics",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        *_presentable(),
        sa.Column("topic_id", sa.Integer(), sa.ForeignKey("topics.id", ondelete="CASCADE")),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("categories.id", ondelete="CASCADE")),
        sa.Column("adult", sa.Boolean(), nullable=False, server_default=FALSE),
        *_timestamps(),
    )
    op.create_index("ix_sub_topics_topic_id", "sub_topics", ["topic_id"])
    op.create_index("ix_sub_topics_category_id", "sub_topics", ["category_id"])

    op.create_table(
        "questions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("sub_topic_id", sa.Integer(), sa.ForeignKey("sub_topics.id")),
        sa.Column("question_text", sa.Text(), nullable=False),
        sa.Column("question_type", sa.String(30), nullable=False, server_default=sa.text("'yes_no'")),
        sa.Column("option_text", sa.String(500)),
        sa.Column("option_img", sa.Text()),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=TRUE),
        *_timestamps(),
    )
    op.create_index("ix_questions_sub_topic_id", "questions", ["sub_topic_id"])

    op.create_table(
        "user_answers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("question_id", sa.Integer(), sa.ForeignKey("questions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("answer_text", sa.Text()),
        sa.Column("answer_status", sa.String(20), nullable=False, server_default=sa.text("'complete'")),
        sa.Column("answered_at", sa.DateTime(timezone=True), nullable=False, server_default=NOW),
    )
    op.create_index("idx_user_answers_user_question", "user_answers", ["user_id", "question_id"])

    # ── Journal ───────────────────────────────────────────────────────────
    op.create_table(
        "journal",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "relationship_id",
            sa.Integer(),
            sa.ForeignKey("relationships.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("title", sa.Text()),
        sa.Column("color_code", sa.String(50)),
        sa.Column("date_time", sa.DateTime(timezone=True), nullable=False, server_default=NOW),
        sa.Column("lat", sa.Numeric(10, 8)),
        sa.Column("long", sa.Numeric(11, 8)),
        sa.Column("location", sa.Text()),
        sa.Column("images", sa.Text()),
        sa.Column("description", sa.Text()),
        *_timestamps(),
    )
    op.create_index("ix_journal_relationship_id", "journal", ["relationship_id"])

    op.create_table(
        "journal_comments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("journal_id", sa.Integer(), sa.ForeignKey("journal.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=NOW),
    )
    op.create_index("ix_journal_comments_journal_id", "journal_comments", ["journal_id"])

    # ── Activity ──────────────────────────────────────────────────────────
    op.create_table(
        "daily_app_opens",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("opened_at", sa.DateTime(timezone=True), nullable=False, server_default=NOW),
        sa.Column("opened_on", sa.Date(), nullable=False),
        sa.UniqueConstraint("user_id", "opened_on", name="uq_daily_app_opens_user_day"),
    )
    op.create_index("idx_daily_app_opens_user_opened", "daily_app_opens", ["user_id", "opened_at"])

    op.create_table(
        "active_random_subtopics",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("relationship_id", sa.Integer(), sa.ForeignKey("relationships.id", ondelete="CASCADE")),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE")),
        sa.Column("subtopic_ids", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=NOW),
    )
    op.create_index(
        "ix_active_random_subtopics_relationship_id", "active_random_subtopics", ["relationship_id"]
    )
    op.create_index("ix_active_random_subtopics_user_id", "active_random_subtopics", ["user_id"])


def downgrade() -> None:
    for table in (
        "active_random_subtopics",
        "daily_app_opens",
        "journal_comments",
        "journal",
        "user_answers",
        "questions",
        "sub_topics",
        "topics",
        "categories",
        "relationships",
        "users",
    ):
        op.drop_table(table)
