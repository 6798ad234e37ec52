"""
Notification service - matches events to recipients and dispatches pushes.

Two triggers, same pipeline:
  - new job posting  -> every contractor the job matches
  - new chat message -> the other participant of the room

Pipeline per trigger:
  1. Resolve the push sender (missing credentials abort here, before any send)
  2. Work out recipients (match rules / room participants)
  3. Load preferences and device tokens
  4. Drop tokens whose user disabled the notification type, is inside quiet
     hours, or (jobs only) was already notified about this job
  5. Send to every remaining token concurrently

Each send is isolated: a provider error, a rejected token or a timeout is
recorded in the result and the other sends carry on. Partial failure is never
raised; only missing configuration and invalid/missing input are.
"""
import asyncio
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional, Tuple
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.config import settings
from marketplace.core.exceptions import (
    InvalidEventException,
    JobNotFoundException,
    ChatRoomNotFoundException,
    ChatMessageNotFoundException,
    PushProviderError,
)
from marketplace.core.logging import get_logger
from marketplace.matching.rules import matching_user_ids
from marketplace.matching.time_window import is_in_quiet_hours
from marketplace.models.notification import UserDeviceToken
from marketplace.push.base import PushMessage, PushSender
from marketplace.push.links import job_deep_link, chat_deep_link
from marketplace.push.registry import get_push_sender
from marketplace.repositories.chat_repository import ChatRoomRepository, ChatMessageRepository
from marketplace.repositories.contractor_repository import ContractorRepository
from marketplace.repositories.job_repository import JobRepository
from marketplace.repositories.notification_repository import (
    DeviceTokenRepository,
    PreferenceRepository,
    JobNotificationRepository,
)
from marketplace.schemas.chat import ChatMessageEvent
from marketplace.schemas.job import JobEvent
from marketplace.schemas.notification import DispatchError, DispatchResult

logger = get_logger(__name__)


# ─── Event parsing ────────────────────────────────────────────


def parse_job_event(record: Optional[dict]) -> JobEvent:
    """Validate a webhook record as a job posting. Raises InvalidEventException."""
    if not record or not record.get("id"):
        raise InvalidEventException("Job record is missing or has no id")
    try:
        return JobEvent.model_validate(record)
    except ValidationError as e:
        raise InvalidEventException(f"Invalid job record: {e.errors()[0]['msg']}") from e


def parse_chat_message_event(record: Optional[dict]) -> ChatMessageEvent:
    """Validate a webhook record as a chat message. Raises InvalidEventException."""
    if not record or not record.get("id"):
        raise InvalidEventException("Chat message record is missing or has no id")
    try:
        return ChatMessageEvent.model_validate(record)
    except ValidationError as e:
        raise InvalidEventException(f"Invalid chat message record: {e.errors()[0]['msg']}") from e


# ─── Payloads ─────────────────────────────────────────────────


def build_job_message(job: JobEvent) -> PushMessage:
    """Provider-agnostic notification for a new job."""
    title = f"New {job.category_name} Job: {job.title}" if job.category_name else f"New Job: {job.title}"

    lines = [
        f"Location: {job.location_text or 'Not specified'}",
        f"Compensation: {job.compensation_range or 'Not specified'}",
    ]
    if job.required_skills:
        lines.append(f"Skills: {', '.join(job.required_skills)}")

    return PushMessage(
        title=title,
        body="\n".join(lines),
        data={
            "type": "new_job",
            "jobId": str(job.id),
            "deepLink": job_deep_link(job.id),
            "title": job.title,
            "location": job.location_text,
            "compensation": job.compensation_range,
            "category": job.category_name,
            "requiredSkills": list(job.required_skills),
        },
    )


def build_chat_message(
    message: ChatMessageEvent,
    sender_name: str,
    max_chars: Optional[int] = None,
) -> PushMessage:
    """Provider-agnostic notification for a new chat message."""
    max_chars = max_chars or settings.chat_preview_max_chars
    content = message.content or ""
    preview = content if len(content) <= max_chars else content[:max_chars] + "..."

    return PushMessage(
        title=f"New message from {sender_name}",
        body=preview,
        data={
            "type": "chat_message",
            "messageId": str(message.id),
            "roomId": str(message.room_id),
            "senderId": str(message.sender_user_id),
            "senderName": sender_name,
            "deepLink": chat_deep_link(message.room_id),
        },
    )


def _mask(token: str) -> str:
    return token if len(token) <= 12 else f"{token[:12]}..."


class NotificationService:
    """
    Dispatches push notifications for new jobs and chat messages.

    Repositories and the sender factory are injectable so the pipeline can
    run against fakes.
    """

    def __init__(
        self,
        *,
        sender_factory: Callable[[], PushSender] = get_push_sender,
        contractor_repo: Optional[ContractorRepository] = None,
        job_repo: Optional[JobRepository] = None,
        token_repo: Optional[DeviceTokenRepository] = None,
        preference_repo: Optional[PreferenceRepository] = None,
        job_notification_repo: Optional[JobNotificationRepository] = None,
        room_repo: Optional[ChatRoomRepository] = None,
        message_repo: Optional[ChatMessageRepository] = None,
        send_timeout: Optional[float] = None,
        max_concurrency: Optional[int] = None,
    ):
        self.sender_factory = sender_factory
        self.contractor_repo = contractor_repo or ContractorRepository()
        self.job_repo = job_repo or JobRepository()
        self.token_repo = token_repo or DeviceTokenRepository()
        self.preference_repo = preference_repo or PreferenceRepository()
        self.job_notification_repo = job_notification_repo or JobNotificationRepository()
        self.room_repo = room_repo or ChatRoomRepository()
        self.message_repo = message_repo or ChatMessageRepository()
        self.send_timeout = send_timeout or settings.push_timeout_seconds
        self.max_concurrency = max_concurrency or settings.push_max_concurrency

    # ─── New jobs ─────────────────────────────────────────────

    async def notify_for_job_id(
        self,
        db: AsyncSession,
        job_id: UUID,
    ) -> DispatchResult:
        """Load a job posting and dispatch it. Used by the Celery task."""
        job = await self.job_repo.get_by_id(db, job_id)
        if not job:
            raise JobNotFoundException()
        return await self.dispatch_new_job(db, JobEvent.model_validate(job))

    async def dispatch_new_job(
        self,
        db: AsyncSession,
        job: JobEvent,
        *,
        now: Optional[datetime] = None,
    ) -> DispatchResult:
        """
        Notify every matching contractor about a new job.

        Raises:
            InvalidEventException: job has no id
            ConfigurationException: push provider not configured
        """
        if job is None or job.id is None:
            raise InvalidEventException("Job has no id")

        now = now or datetime.now(timezone.utc)
        sender = self.sender_factory()
        log = logger.bind(job_id=str(job.id))
        log.info(
            "job_dispatch_started",
            title=job.title,
            location=job.location_text,
            category=job.category_name,
            required_skills=job.required_skills,
        )

        contractors = await self.contractor_repo.get_all(db)
        user_ids = matching_user_ids(job, contractors)
        result = DispatchResult(job_id=job.id, matched=len(user_ids))

        if not user_ids:
            log.info("job_dispatch_no_matches", contractors=len(contractors))
            return result

        preferences = await self.preference_repo.find_for_users(db, user_ids)
        tokens = await self.token_repo.find_for_users(db, user_ids)
        already_notified = await self.job_notification_repo.find_notified_user_ids(
            db, job.id, user_ids
        )

        deliveries: List[UserDeviceToken] = []
        for token in tokens:
            preference = preferences.get(token.user_id)
            if preference is None or not preference.enable_new_job_notifications:
                result.skipped_disabled += 1
                continue
            if self._in_quiet_hours(preference, now):
                result.skipped_quiet_hours += 1
                continue
            if token.user_id in already_notified:
                result.skipped_duplicate += 1
                continue
            deliveries.append(token)

        if deliveries:
            # Recorded before sending: at most one push per user per job
            await self.job_notification_repo.record_many(
                db,
                job.id,
                {token.user_id for token in deliveries},
                notified_at=now,
            )
            await db.commit()

        await self._deliver(sender, deliveries, build_job_message(job), result)

        log.info(
            "job_dispatch_completed",
            matched=result.matched,
            sent=result.sent,
            failed=result.failed,
            skipped_disabled=result.skipped_disabled,
            skipped_quiet_hours=result.skipped_quiet_hours,
            skipped_duplicate=result.skipped_duplicate,
        )
        return result

    # ─── Chat messages ────────────────────────────────────────

    async def notify_for_message_id(
        self,
        db: AsyncSession,
        message_id: UUID,
    ) -> DispatchResult:
        """Load a chat message and dispatch it. Used by the Celery task."""
        message = await self.message_repo.get_by_id(db, message_id)
        if not message:
            raise ChatMessageNotFoundException()
        return await self.dispatch_chat_message(db, ChatMessageEvent.model_validate(message))

    async def dispatch_chat_message(
        self,
        db: AsyncSession,
        message: ChatMessageEvent,
        *,
        now: Optional[datetime] = None,
    ) -> DispatchResult:
        """
        Notify the recipient of a chat message.

        Chat notifications default to enabled when the recipient has no
        preference row.

        Raises:
            InvalidEventException: message has no id
            ConfigurationException: push provider not configured
            ChatRoomNotFoundException: the message's room does not exist
        """
        if message is None or message.id is None:
            raise InvalidEventException("Chat message has no id")

        now = now or datetime.now(timezone.utc)
        sender = self.sender_factory()

        room = await self.room_repo.get_by_id(db, message.room_id)
        if not room:
            raise ChatRoomNotFoundException()

        recipient_id = room.other_participant(message.sender_user_id)
        log = logger.bind(message_id=str(message.id), room_id=str(room.id), recipient_id=str(recipient_id))
        result = DispatchResult(room_id=room.id, matched=1)

        preference = await self.preference_repo.get_for_user(db, recipient_id)
        tokens = await self.token_repo.find_for_users(db, [recipient_id])

        if preference is not None and preference.enable_chat_notifications is False:
            result.skipped_disabled = len(tokens)
            log.info("chat_dispatch_disabled")
            return result

        if self._in_quiet_hours(preference, now):
            result.skipped_quiet_hours = len(tokens)
            log.info("chat_dispatch_quiet_hours")
            return result

        sender_name = await self._resolve_sender_name(db, message, room)
        await self._deliver(sender, tokens, build_chat_message(message, sender_name), result)

        log.info("chat_dispatch_completed", sent=result.sent, failed=result.failed)
        return result

    async def _resolve_sender_name(self, db: AsyncSession, message: ChatMessageEvent, room) -> str:
        if message.sender_name:
            return message.sender_name
        if message.sender_user_id == room.contractor_id:
            profile = await self.contractor_repo.get_by_user_id(db, message.sender_user_id)
            if profile and profile.full_name:
                return profile.full_name
        return "Someone"

    # ─── Delivery ─────────────────────────────────────────────

    def _in_quiet_hours(self, preference, now: datetime) -> bool:
        try:
            return is_in_quiet_hours(preference, now)
        except ValueError:
            logger.warning(
                "invalid_quiet_hours",
                user_id=str(getattr(preference, "user_id", "")),
                start=getattr(preference, "quiet_hours_start", None),
                end=getattr(preference, "quiet_hours_end", None),
            )
            return False

    async def _deliver(
        self,
        sender: PushSender,
        tokens: Iterable[UserDeviceToken],
        message: PushMessage,
        result: DispatchResult,
    ) -> None:
        """Send `message` to every token concurrently and fold outcomes into `result`."""
        device_tokens = [token.device_token for token in tokens]
        if not device_tokens:
            return

        semaphore = asyncio.Semaphore(self.max_concurrency)
        async with sender:
            outcomes = await asyncio.gather(
                *(self._send_one(sender, semaphore, token, message) for token in device_tokens)
            )

        for device_token, error in outcomes:
            if error is None:
                result.sent += 1
            else:
                result.errors.append(DispatchError(token=device_token, message=error))

    async def _send_one(
        self,
        sender: PushSender,
        semaphore: asyncio.Semaphore,
        device_token: str,
        message: PushMessage,
    ) -> Tuple[str, Optional[str]]:
        """
        Send to one token. Never raises.

        Returns:
            (device_token, error message or None on success)
        """
        async with semaphore:
            try:
                push_result = await asyncio.wait_for(
                    sender.send(device_token, message),
                    timeout=self.send_timeout,
                )
            except asyncio.TimeoutError:
                error = f"{sender.name} send timed out after {self.send_timeout}s"
            except PushProviderError as e:
                error = e.message
            except Exception as e:
                logger.error("push_send_crashed", provider=sender.name, token=_mask(device_token), exc_info=True)
                error = f"unexpected error: {e}"
            else:
                if push_result.ok:
                    logger.debug("push_sent", provider=sender.name, token=_mask(device_token))
                    return device_token, None
                error = f"{sender.name} rejected message (status {push_result.status_code}): {push_result.body}"

        logger.warning("push_send_failed", provider=sender.name, token=_mask(device_token), error=error)
        return device_token, error
