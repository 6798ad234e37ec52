"""
Job repository - data access for JobPosting entity.
"""
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.models.job_posting import JobPosting, JOB_STATUS_ASSIGNED
from marketplace.repositories.base import BaseRepository


class JobRepository(BaseRepository[JobPosting]):
    def __init__(self):
        super().__init__(JobPosting)

    async def find_assigned_with_contractor(
        self,
        db: AsyncSession,
    ) -> List[JobPosting]:
        """Jobs in 'assigned' status that have a selected contractor."""
        result = await db.execute(
            select(JobPosting)
            .where(
                JobPosting.status == JOB_STATUS_ASSIGNED,
                JobPosting.selected_contractor_id.isnot(None),
            )
            .order_by(JobPosting.created_at)
        )
        return list(result.scalars().all())
