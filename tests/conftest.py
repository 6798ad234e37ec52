"""
Shared fixtures: in-memory repositories, a fake async session and a
scriptable push sender. Nothing here touches Postgres or Redis.
"""
import asyncio
import uuid
from types import SimpleNamespace
from typing import Dict, List, Optional, Set, Tuple

import pytest
from sqlalchemy.exc import SQLAlchemyError

import marketplace.models  # noqa: F401  (configures mappers)
from marketplace.core.exceptions import PushProviderError
from marketplace.core.rate_limit import limiter
from marketplace.models.chat import ChatRoom
from marketplace.push.base import PushMessage, PushResult, PushSender

limiter.enabled = False


# ─── Session ───────────────────────────────────────────────────


class _Savepoint:
    def __init__(self, session: "FakeSession"):
        self.session = session

    async def __aenter__(self):
        self.session.savepoints += 1
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.session.savepoint_rollbacks += 1
        return False


class FakeSession:
    """Stands in for AsyncSession; repositories are faked so no SQL runs."""

    def __init__(self):
        self.commits = 0
        self.rollbacks = 0
        self.savepoints = 0
        self.savepoint_rollbacks = 0
        self.added: list = []

    def add(self, instance):
        self.added.append(instance)

    async def commit(self):
        self.commits += 1

    async def rollback(self):
        self.rollbacks += 1

    async def flush(self):
        pass

    async def refresh(self, instance):
        pass

    def begin_nested(self):
        return _Savepoint(self)

    async def execute(self, *args, **kwargs):
        raise AssertionError("FakeSession does not run SQL; fake the repository instead")


# ─── Builders ──────────────────────────────────────────────────


def make_contractor(**overrides) -> SimpleNamespace:
    fields = dict(
        id=uuid.uuid4(),
        user_id=uuid.uuid4(),
        full_name="Test Contractor",
        bio=None,
        years_experience=None,
        profile_picture_url=None,
        average_rating=None,
        specialties=[],
        service_areas=[],
        region_text=None,
        specialty_tags=[],
        availability_status="available",
        availability_message=None,
        availability_updated_at=None,
        busy_until=None,
        working_hours=None,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def make_job(**overrides) -> SimpleNamespace:
    fields = dict(
        id=uuid.uuid4(),
        posted_by_user_id=uuid.uuid4(),
        title="Fix sink",
        description="Leaking under the sink",
        location_text="Nairobi",
        compensation_range="KES 5,000",
        category_id=None,
        category_name="Plumbing",
        required_skills=["Plumbing"],
        specialty_tags=[],
        status="open",
        selected_contractor_id=None,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def make_preference(user_id, **overrides) -> SimpleNamespace:
    fields = dict(
        user_id=user_id,
        enable_new_job_notifications=True,
        enable_chat_notifications=True,
        quiet_hours_start=None,
        quiet_hours_end=None,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def make_token(user_id, device_token: str) -> SimpleNamespace:
    return SimpleNamespace(user_id=user_id, device_token=device_token, platform="android")


# ─── Repositories ──────────────────────────────────────────────


class FakeContractorRepository:
    def __init__(self, contractors=None):
        self.contractors: List[SimpleNamespace] = list(contractors or [])
        self.filter_calls = 0

    async def get_all(self, db):
        return list(self.contractors)

    async def get_by_id(self, db, id):
        return next((c for c in self.contractors if c.id == id), None)

    async def get_by_user_id(self, db, user_id):
        return next((c for c in self.contractors if c.user_id == user_id), None)

    async def find_with_filters(self, db, filters, *, now, page=1, limit=20):
        self.filter_calls += 1
        rows = self.contractors
        if filters.services:
            rows = [c for c in rows if set(c.specialties) & set(filters.services)]
        if filters.available_now:
            rows = [
                c for c in rows
                if c.availability_status == "available" and (c.busy_until is None or c.busy_until <= now)
            ]
        start = (page - 1) * limit
        return rows[start:start + limit], len(rows)

    async def get_distinct_specialties(self, db):
        return sorted({s for c in self.contractors for s in c.specialties})

    async def get_distinct_service_areas(self, db):
        return sorted({a for c in self.contractors for a in c.service_areas})


class FakeJobRepository:
    def __init__(self, jobs=None):
        self.jobs: List[SimpleNamespace] = list(jobs or [])

    async def get_by_id(self, db, id):
        return next((j for j in self.jobs if j.id == id), None)

    async def find_assigned_with_contractor(self, db):
        return [j for j in self.jobs if j.status == "assigned" and j.selected_contractor_id]


class FakeDeviceTokenRepository:
    def __init__(self, tokens=None):
        self.tokens: List[SimpleNamespace] = list(tokens or [])

    async def find_for_users(self, db, user_ids):
        wanted = set(user_ids)
        return [t for t in self.tokens if t.user_id in wanted]


class FakePreferenceRepository:
    def __init__(self, preferences=None):
        self.preferences: Dict = {p.user_id: p for p in (preferences or [])}

    async def get_for_user(self, db, user_id):
        return self.preferences.get(user_id)

    async def find_for_users(self, db, user_ids):
        return {uid: self.preferences[uid] for uid in user_ids if uid in self.preferences}


class FakeJobNotificationRepository:
    def __init__(self, notified: Optional[Set[Tuple]] = None):
        self.notified: Set[Tuple] = set(notified or ())

    async def find_notified_user_ids(self, db, job_id, user_ids):
        return {uid for uid in user_ids if (uid, job_id) in self.notified}

    async def record_many(self, db, job_id, user_ids, notified_at, channel="push"):
        for uid in user_ids:
            self.notified.add((uid, job_id))


class FakeChatRoomRepository:
    def __init__(self, rooms=None):
        self.rooms: Dict[uuid.UUID, ChatRoom] = {r.id: r for r in (rooms or [])}
        self.fail_for: Set[Tuple] = set()

    async def get_by_id(self, db, id):
        return self.rooms.get(id)

    def _find_general(self, contractor_id, client_id):
        for room in self.rooms.values():
            if room.contractor_id == contractor_id and room.client_id == client_id and room.job_id is None:
                return room
        return None

    async def get_or_create_general(self, db, contractor_id, client_id):
        if (contractor_id, client_id) in self.fail_for:
            raise SQLAlchemyError("insert failed")
        existing = self._find_general(contractor_id, client_id)
        if existing is not None:
            return existing, False
        # Yield between the lookup and the insert so concurrent callers interleave
        await asyncio.sleep(0)
        # ON CONFLICT DO NOTHING: the loser re-reads the winner's row
        existing = self._find_general(contractor_id, client_id)
        if existing is not None:
            return existing, False
        room = ChatRoom(id=uuid.uuid4(), contractor_id=contractor_id, client_id=client_id, job_id=None)
        self.rooms[room.id] = room
        return room, True


class FakeChatMessageRepository:
    def __init__(self, messages=None, fail: bool = False):
        self.messages: List[SimpleNamespace] = list(messages or [])
        self.fail = fail

    async def get_by_id(self, db, id):
        return next((m for m in self.messages if m.id == id), None)

    async def create(self, db, **kwargs):
        if self.fail:
            raise SQLAlchemyError("chat_messages insert failed")
        message = SimpleNamespace(id=uuid.uuid4(), **kwargs)
        self.messages.append(message)
        return message


# ─── Push ──────────────────────────────────────────────────────


class FakeSender(PushSender):
    """
    Scriptable sender. Tokens in `rejected` get a non-ok result, tokens in
    `raising` raise PushProviderError, tokens in `hanging` never answer.
    """

    name = "fake"

    def __init__(self, rejected=(), raising=(), hanging=()):
        super().__init__(timeout=1.0)
        self.rejected = set(rejected)
        self.raising = set(raising)
        self.hanging = set(hanging)
        self.sent: List[Tuple[str, PushMessage]] = []
        self.entered = False

    async def __aenter__(self):
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False

    def build_payload(self, device_token, message):
        return {"to": device_token}

    def auth_headers(self):
        return {}

    def get_endpoint(self):
        return "https://push.invalid/send"

    async def send(self, device_token, message):
        self.sent.append((device_token, message))
        if device_token in self.raising:
            raise PushProviderError("fake request failed", status_code=502)
        if device_token in self.hanging:
            await asyncio.sleep(10)
        if device_token in self.rejected:
            return PushResult(ok=False, status_code=200, body={"failure": 1})
        return PushResult(ok=True, status_code=200, body={"success": 1})


@pytest.fixture
def db():
    return FakeSession()


@pytest.fixture
def sender():
    return FakeSender()
