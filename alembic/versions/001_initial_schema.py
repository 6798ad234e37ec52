"""initial marketplace schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

Creates:
  • contractor_profiles            matching fields, availability, working hours
  • job_postings                   FK selected_contractor_id -> contractor_profiles
  • chat_rooms                     partial unique index: one general room
                                   (job_id IS NULL) per contractor/client pair
  • chat_messages
  • user_device_tokens
  • user_notification_preferences
  • job_notifications              unique (user_id, job_id) dedup key
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _id_and_timestamps():
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "contractor_profiles",
        *_id_and_timestamps(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("years_experience", sa.Integer(), nullable=True),
        sa.Column("profile_picture_url", sa.Text(), nullable=True),
        sa.Column("average_rating", sa.Float(), nullable=True),
        sa.Column("specialties", postgresql.ARRAY(sa.String()), nullable=True),
        sa.Column("service_areas", postgresql.ARRAY(sa.String()), nullable=True),
        sa.Column("region_text", sa.String(length=255), nullable=True),
        sa.Column("specialty_tags", postgresql.ARRAY(sa.String()), nullable=True),
        sa.Column("availability_status", sa.String(length=20), nullable=False, server_default="available"),
        sa.Column("availability_message", sa.Text(), nullable=True),
        sa.Column("availability_updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("busy_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("working_hours", postgresql.JSONB(), nullable=True),
    )
    op.create_index("ix_contractor_profiles_user_id", "contractor_profiles", ["user_id"], unique=True)
    op.create_index("ix_contractor_profiles_full_name", "contractor_profiles", ["full_name"])
    op.create_index("ix_contractor_profiles_average_rating", "contractor_profiles", ["average_rating"])
    op.create_index("ix_contractor_profiles_availability_status", "contractor_profiles", ["availability_status"])

    op.create_table(
        "job_postings",
        *_id_and_timestamps(),
        sa.Column("posted_by_user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("location_text", sa.String(length=255), nullable=True),
        sa.Column("compensation_range", sa.String(length=100), nullable=True),
        sa.Column("category_id", sa.String(length=100), nullable=True),
        sa.Column("category_name", sa.String(length=255), nullable=True),
        sa.Column("required_skills", postgresql.ARRAY(sa.String()), nullable=True),
        sa.Column("specialty_tags", postgresql.ARRAY(sa.String()), nullable=True),
        sa.Column("payment_status", sa.String(length=20), nullable=False, server_default="unpaid"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="open"),
        sa.Column(
            "selected_contractor_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("contractor_profiles.id", ondelete="SET NULL"),
            nullable=True,
        ),
    )
    op.create_index("ix_job_postings_posted_by_user_id", "job_postings", ["posted_by_user_id"])
    op.create_index("ix_job_postings_status", "job_postings", ["status"])
    op.create_index("ix_job_postings_selected_contractor_id", "job_postings", ["selected_contractor_id"])

    op.create_table(
        "chat_rooms",
        *_id_and_timestamps(),
        sa.Column("contractor_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("client_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "job_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("job_postings.id", ondelete="SET NULL"),
            nullable=True,
        ),
    )
    op.create_index("ix_chat_rooms_contractor_id", "chat_rooms", ["contractor_id"])
    op.create_index("ix_chat_rooms_client_id", "chat_rooms", ["client_id"])
    op.create_index(
        "uq_chat_rooms_general_pair",
        "chat_rooms",
        ["contractor_id", "client_id"],
        unique=True,
        postgresql_where=sa.text("job_id IS NULL"),
    )

    op.create_table(
        "chat_messages",
        *_id_and_timestamps(),
        sa.Column(
            "room_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("chat_rooms.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sender_user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("sender_name", sa.String(length=255), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("job_reference_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("job_context", sa.Text(), nullable=True),
    )
    op.create_index("ix_chat_messages_room_id", "chat_messages", ["room_id"])

    op.create_table(
        "user_device_tokens",
        *_id_and_timestamps(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("device_token", sa.Text(), nullable=False, unique=True),
        sa.Column("platform", sa.String(length=20), nullable=False),
    )
    op.create_index("ix_user_device_tokens_user_id", "user_device_tokens", ["user_id"])

    op.create_table(
        "user_notification_preferences",
        *_id_and_timestamps(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("enable_new_job_notifications", sa.Boolean(), nullable=True),
        sa.Column("enable_chat_notifications", sa.Boolean(), nullable=True),
        sa.Column("quiet_hours_start", sa.String(length=8), nullable=True),
        sa.Column("quiet_hours_end", sa.String(length=8), nullable=True),
    )
    op.create_index(
        "ix_user_notification_preferences_user_id",
        "user_notification_preferences",
        ["user_id"],
        unique=True,
    )

    op.create_table(
        "job_notifications",
        *_id_and_timestamps(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "job_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("job_postings.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("notified_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("notification_channel", sa.String(length=20), nullable=True),
        sa.UniqueConstraint("user_id", "job_id", name="uq_job_notification_user_job"),
    )
    op.create_index("ix_job_notifications_user_id", "job_notifications", ["user_id"])
    op.create_index("ix_job_notifications_job_id", "job_notifications", ["job_id"])


def downgrade() -> None:
    op.drop_table("job_notifications")
    op.drop_table("user_notification_preferences")
    op.drop_table("user_device_tokens")
    op.drop_table("chat_messages")
    op.drop_index("uq_chat_rooms_general_pair", table_name="chat_rooms")
    op.drop_table("chat_rooms")
    op.drop_table("job_postings")
    op.drop_table("contractor_profiles")
