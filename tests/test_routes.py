import uuid

import pytest
from fastapi.testclient import TestClient

from conftest import (
    FakeChatMessageRepository,
    FakeChatRoomRepository,
    FakeContractorRepository,
    FakeDeviceTokenRepository,
    FakeJobNotificationRepository,
    FakeJobRepository,
    FakePreferenceRepository,
    FakeSender,
    FakeSession,
    make_contractor,
    make_preference,
    make_token,
)
from marketplace.api import deps
from marketplace.api.routes import health
from marketplace.core.cache import TTLCache
from marketplace.core.database import get_db
from marketplace.core.exceptions import ConfigurationException
from marketplace.main import app
from marketplace.services.chat_service import ChatService
from marketplace.services.contractor_service import ContractorService
from marketplace.services.notification_service import NotificationService


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def contractors():
    return FakeContractorRepository([
        make_contractor(full_name="Amina", specialties=["Plumbing"], service_areas=["Nairobi"], average_rating=4.8),
    ])


@pytest.fixture
def sender():
    return FakeSender()


@pytest.fixture
def client(session, contractors, sender):
    user_id = contractors.contractors[0].user_id
    notification_service = NotificationService(
        sender_factory=lambda: sender,
        contractor_repo=contractors,
        job_repo=FakeJobRepository(),
        token_repo=FakeDeviceTokenRepository([make_token(user_id, "amina-phone")]),
        preference_repo=FakePreferenceRepository([make_preference(user_id)]),
        job_notification_repo=FakeJobNotificationRepository(),
        room_repo=FakeChatRoomRepository(),
        message_repo=FakeChatMessageRepository(),
    )
    chat_service = ChatService(
        room_repo=FakeChatRoomRepository(),
        message_repo=FakeChatMessageRepository(),
        job_repo=FakeJobRepository(),
        contractor_repo=contractors,
    )
    contractor_service = ContractorService(cache=TTLCache(ttl_seconds=300), contractor_repo=contractors)

    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[deps.get_notification_service] = lambda: notification_service
    app.dependency_overrides[deps.get_chat_service] = lambda: chat_service
    app.dependency_overrides[deps.get_contractor_service] = lambda: contractor_service
    yield TestClient(app)
    app.dependency_overrides.clear()


def job_record(**overrides):
    record = {
        "id": str(uuid.uuid4()),
        "title": "Fix sink",
        "location_text": "Nairobi",
        "compensation_range": "KES 5,000",
        "category_name": "Plumbing",
        "required_skills": ["Plumbing"],
    }
    record.update(overrides)
    return record


class TestWebhooks:
    def test_job_posting_dispatches(self, client, sender):
        record = job_record()
        r = client.post("/api/v1/webhooks/job-postings", json={"type": "INSERT", "table": "job_postings", "record": record})

        assert r.status_code == 200
        data = r.json()
        assert data["job_id"] == record["id"]
        assert data["matched"] == 1
        assert data["sent"] == 1
        assert data["errors"] == []
        assert sender.sent[0][0] == "amina-phone"

    def test_job_posting_without_id(self, client):
        r = client.post("/api/v1/webhooks/job-postings", json={"record": {"title": "Fix sink"}})

        assert r.status_code == 400
        assert r.json()["error"] == "INVALID_EVENT"

    def test_job_posting_without_record(self, client):
        r = client.post("/api/v1/webhooks/job-postings", json={"type": "INSERT"})
        assert r.status_code == 400

    def test_missing_push_credentials(self, client):
        def missing():
            raise ConfigurationException("FCM server key is not configured (FCM_SERVER_KEY)")

        service = app.dependency_overrides[deps.get_notification_service]()
        service.sender_factory = missing

        r = client.post("/api/v1/webhooks/job-postings", json={"record": job_record()})

        assert r.status_code == 500
        assert r.json()["error"] == "CONFIGURATION_ERROR"

    def test_chat_message_for_unknown_room(self, client):
        record = {
            "id": str(uuid.uuid4()),
            "room_id": str(uuid.uuid4()),
            "sender_user_id": str(uuid.uuid4()),
            "content": "Hi",
        }
        r = client.post("/api/v1/webhooks/chat-messages", json={"record": record})

        assert r.status_code == 404
        assert r.json()["error"] == "CHAT_ROOM_NOT_FOUND"


class TestContractors:
    def test_list(self, client):
        r = client.get("/api/v1/contractors", params={"services": ["Plumbing"], "sort_by": "name"})

        assert r.status_code == 200
        data = r.json()
        assert data["total"] == 1
        assert data["items"][0]["full_name"] == "Amina"
        assert data["items"][0]["is_currently_available"] is True

    def test_rejects_unknown_sort(self, client):
        r = client.get("/api/v1/contractors", params={"sort_by": "price"})
        assert r.status_code == 422

    def test_filter_options(self, client):
        r = client.get("/api/v1/contractors/filter-options")
        assert r.status_code == 200
        assert r.json() == {"services": ["Plumbing"], "locations": ["Nairobi"]}

    def test_availability_roundtrip(self, client, contractors):
        contractor_id = contractors.contractors[0].id

        r = client.patch(
            f"/api/v1/contractors/{contractor_id}/availability",
            json={"availability_status": "busy", "availability_message": "Away"},
        )
        assert r.status_code == 200
        assert r.json()["is_currently_available"] is False

        r = client.get(f"/api/v1/contractors/{contractor_id}/availability")
        assert r.status_code == 200
        assert r.json()["availability_status"] == "busy"

    def test_invalid_working_hours_rejected(self, client, contractors):
        contractor_id = contractors.contractors[0].id
        r = client.patch(
            f"/api/v1/contractors/{contractor_id}/availability",
            json={"working_hours": {"monday": {"start": "9am", "end": "17:00"}}},
        )
        assert r.status_code == 422

    def test_unknown_contractor(self, client):
        r = client.get(f"/api/v1/contractors/{uuid.uuid4()}/availability")
        assert r.status_code == 404
        assert r.json()["error"] == "CONTRACTOR_NOT_FOUND"


class TestChatRooms:
    def test_general_room_get_or_create(self, client):
        body = {"contractor_id": str(uuid.uuid4()), "client_id": str(uuid.uuid4())}

        first = client.post("/api/v1/chat-rooms/general", json=body)
        second = client.post("/api/v1/chat-rooms/general", json=body)

        assert first.status_code == 200
        assert first.json()["created"] is True
        assert second.json()["created"] is False
        assert first.json()["room_id"] == second.json()["room_id"]

    def test_reconcile(self, client):
        r = client.post("/api/v1/admin/reconcile-chat-rooms")
        assert r.status_code == 200
        assert r.json() == {"checked": 0, "created": 0, "existing": 0, "errors": []}


class HealthySession(FakeSession):
    async def execute(self, *args, **kwargs):
        return None


class TestHealth:
    def test_healthy(self, client, monkeypatch):
        async def ok():
            return None

        async def override_get_db():
            yield HealthySession()

        monkeypatch.setattr(health, "ping_redis", ok)
        app.dependency_overrides[get_db] = override_get_db

        r = client.get("/health")

        assert r.status_code == 200
        assert r.json()["status"] == "healthy"

    def test_degraded_when_redis_down(self, client, monkeypatch):
        async def down():
            raise ConnectionError("redis unreachable")

        async def override_get_db():
            yield HealthySession()

        monkeypatch.setattr(health, "ping_redis", down)
        app.dependency_overrides[get_db] = override_get_db

        r = client.get("/health")

        assert r.status_code == 200
        assert r.json()["status"] == "degraded"
        assert r.json()["checks"]["database"] == "healthy"
