"""
Notification models - device tokens, per-user preferences, and the
job notification log used to avoid duplicate pushes.
"""
import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import String, Text, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from marketplace.models.base import BaseModel


PLATFORM_IOS = "ios"
PLATFORM_ANDROID = "android"
PLATFORM_WEB = "web"


class UserDeviceToken(BaseModel):
    """
    A push-routable device registered by a user.

    A user may hold several tokens (one per device).
    """

    __tablename__ = "user_device_tokens"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
        index=True,
    )
    device_token: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    platform: Mapped[str] = mapped_column(String(20), nullable=False)  # 'ios', 'android', 'web'

    def __repr__(self) -> str:
        return f"<UserDeviceToken user_id={self.user_id} platform={self.platform}>"


class UserNotificationPreference(BaseModel):
    """
    Per-user notification settings.

    Quiet hours are "HH:MM:SS" strings in UTC. A window whose start is later
    than its end crosses midnight (e.g. 22:00:00 -> 08:00:00).
    """

    __tablename__ = "user_notification_preferences"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
        unique=True,
        index=True,
    )
    enable_new_job_notifications: Mapped[bool] = mapped_column(Boolean, default=True)
    enable_chat_notifications: Mapped[bool] = mapped_column(Boolean, default=True)
    quiet_hours_start: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    quiet_hours_end: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)

    def __repr__(self) -> str:
        return f"<UserNotificationPreference user_id={self.user_id}>"


class JobNotification(BaseModel):
    """
    Record that a user was notified about a job.

    The unique constraint makes repeated triggers for the same job (webhook
    retries, manual re-dispatch) a no-op for users already notified.
    """

    __tablename__ = "job_notifications"

    __table_args__ = (
        UniqueConstraint("user_id", "job_id", name="uq_job_notification_user_job"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
        index=True,
    )
    job_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("job_postings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    notified_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    notification_channel: Mapped[str] = mapped_column(String(20), default="push")

    def __repr__(self) -> str:
        return f"<JobNotification user_id={self.user_id} job_id={self.job_id}>"
