"""
Notification repositories - device tokens, preferences and the job
notification log.
"""
import uuid
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.models.notification import (
    UserDeviceToken,
    UserNotificationPreference,
    JobNotification,
)
from marketplace.repositories.base import BaseRepository


class DeviceTokenRepository(BaseRepository[UserDeviceToken]):
    def __init__(self):
        super().__init__(UserDeviceToken)

    async def find_for_users(
        self,
        db: AsyncSession,
        user_ids: Iterable[UUID],
    ) -> List[UserDeviceToken]:
        """All device tokens belonging to any of `user_ids`."""
        user_ids = list(user_ids)
        if not user_ids:
            return []
        result = await db.execute(
            select(UserDeviceToken).where(UserDeviceToken.user_id.in_(user_ids))
        )
        return list(result.scalars().all())


class PreferenceRepository(BaseRepository[UserNotificationPreference]):
    def __init__(self):
        super().__init__(UserNotificationPreference)

    async def get_for_user(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> Optional[UserNotificationPreference]:
        result = await db.execute(
            select(UserNotificationPreference).where(
                UserNotificationPreference.user_id == user_id
            )
        )
        return result.scalar_one_or_none()

    async def find_for_users(
        self,
        db: AsyncSession,
        user_ids: Iterable[UUID],
    ) -> Dict[UUID, UserNotificationPreference]:
        """Preferences keyed by user id. Users without a row are absent."""
        user_ids = list(user_ids)
        if not user_ids:
            return {}
        result = await db.execute(
            select(UserNotificationPreference).where(
                UserNotificationPreference.user_id.in_(user_ids)
            )
        )
        return {pref.user_id: pref for pref in result.scalars().all()}


class JobNotificationRepository(BaseRepository[JobNotification]):
    def __init__(self):
        super().__init__(JobNotification)

    async def find_notified_user_ids(
        self,
        db: AsyncSession,
        job_id: UUID,
        user_ids: Iterable[UUID],
    ) -> Set[UUID]:
        """Which of `user_ids` were already notified about `job_id`."""
        user_ids = list(user_ids)
        if not user_ids:
            return set()
        result = await db.execute(
            select(JobNotification.user_id).where(
                JobNotification.job_id == job_id,
                JobNotification.user_id.in_(user_ids),
            )
        )
        return set(result.scalars().all())

    async def record_many(
        self,
        db: AsyncSession,
        job_id: UUID,
        user_ids: Iterable[UUID],
        notified_at: datetime,
        channel: str = "push",
    ) -> None:
        """Insert one row per user; rows that already exist are left alone."""
        rows = [
            {
                "id": uuid.uuid4(),
                "user_id": user_id,
                "job_id": job_id,
                "notified_at": notified_at,
                "notification_channel": channel,
            }
            for user_id in user_ids
        ]
        if not rows:
            return
        await db.execute(
            pg_insert(JobNotification)
            .values(rows)
            .on_conflict_do_nothing(constraint="uq_job_notification_user_job")
        )
