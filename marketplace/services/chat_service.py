"""
Chat service - general chat rooms and the assigned-job repair sweep.

When a client selects a contractor for a job, the pair should have a
"general" chat room. Creation normally happens at assignment time; the
reconciliation sweep repairs jobs where that step was missed.
"""
from typing import Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.config import settings
from marketplace.core.exceptions import APIException, ContractorNotFoundException
from marketplace.core.logging import get_logger
from marketplace.models.chat import ChatRoom
from marketplace.models.job_posting import JobPosting
from marketplace.repositories.chat_repository import ChatRoomRepository, ChatMessageRepository
from marketplace.repositories.contractor_repository import ContractorRepository
from marketplace.repositories.job_repository import JobRepository
from marketplace.schemas.chat import ReconcileError, ReconcileResult

logger = get_logger(__name__)


def job_context(job: Optional[JobPosting]) -> Optional[str]:
    """Display context for a message posted on behalf of a job."""
    if job is None:
        return None
    category = job.category_name or "General"
    description = job.description or job.title or ""
    return f"{category} - {description}"


class ChatService:
    """Creates general rooms idempotently and repairs missing ones."""

    def __init__(
        self,
        *,
        room_repo: Optional[ChatRoomRepository] = None,
        message_repo: Optional[ChatMessageRepository] = None,
        job_repo: Optional[JobRepository] = None,
        contractor_repo: Optional[ContractorRepository] = None,
    ):
        self.room_repo = room_repo or ChatRoomRepository()
        self.message_repo = message_repo or ChatMessageRepository()
        self.job_repo = job_repo or JobRepository()
        self.contractor_repo = contractor_repo or ContractorRepository()

    async def get_or_create_general_room(
        self,
        db: AsyncSession,
        contractor_id: UUID,
        client_id: UUID,
        *,
        job: Optional[JobPosting] = None,
        contractor_name: Optional[str] = None,
        commit: bool = True,
    ) -> Tuple[UUID, bool]:
        """
        Return the general room for a contractor/client pair, creating it
        if needed. Safe to call concurrently for the same pair.

        When the room is created for a job, a welcome message from the
        contractor is posted. A failed welcome message never undoes the room.

        Returns:
            (room_id, created)
        """
        room, created = await self.room_repo.get_or_create_general(db, contractor_id, client_id)

        if created:
            logger.info(
                "general_room_created",
                room_id=str(room.id),
                contractor_id=str(contractor_id),
                client_id=str(client_id),
            )
            if job is not None:
                await self._post_welcome_message(db, room, contractor_id, job, contractor_name)

        if commit:
            await db.commit()

        return room.id, created

    async def _post_welcome_message(
        self,
        db: AsyncSession,
        room: ChatRoom,
        contractor_id: UUID,
        job: JobPosting,
        contractor_name: Optional[str],
    ) -> None:
        try:
            async with db.begin_nested():
                await self.message_repo.create(
                    db,
                    room_id=room.id,
                    sender_user_id=contractor_id,
                    sender_name=contractor_name or "Contractor",
                    content=settings.welcome_message,
                    job_reference_id=job.id,
                    job_context=job_context(job),
                )
        except SQLAlchemyError as e:
            logger.warning(
                "welcome_message_failed",
                room_id=str(room.id),
                job_id=str(job.id),
                error=str(e),
            )

    async def reconcile_assigned_jobs(
        self,
        db: AsyncSession,
    ) -> ReconcileResult:
        """
        Ensure every assigned job has a general room for its client and
        selected contractor.

        Each job runs in its own savepoint; one bad job is recorded in
        `errors` and the sweep moves on.
        """
        jobs = await self.job_repo.find_assigned_with_contractor(db)
        result = ReconcileResult(checked=len(jobs))
        logger.info("reconcile_started", jobs=len(jobs))

        for job in jobs:
            try:
                async with db.begin_nested():
                    contractor = await self.contractor_repo.get_by_id(db, job.selected_contractor_id)
                    if contractor is None:
                        raise ContractorNotFoundException()

                    _, created = await self.get_or_create_general_room(
                        db,
                        contractor.user_id,
                        job.posted_by_user_id,
                        job=job,
                        contractor_name=contractor.full_name,
                        commit=False,
                    )
            except Exception as e:
                message = e.message if isinstance(e, APIException) else str(e)
                logger.error("reconcile_job_failed", job_id=str(job.id), error=message, exc_info=True)
                result.errors.append(ReconcileError(job_id=job.id, error=message))
                continue

            if created:
                result.created += 1
            else:
                result.existing += 1

        await db.commit()

        logger.info(
            "reconcile_completed",
            checked=result.checked,
            created=result.created,
            existing=result.existing,
            failed=len(result.errors),
        )
        return result
