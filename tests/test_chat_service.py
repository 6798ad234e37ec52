import asyncio
import uuid

from conftest import (
    FakeChatMessageRepository,
    FakeChatRoomRepository,
    FakeContractorRepository,
    FakeJobRepository,
    make_contractor,
    make_job,
)
from marketplace.core.config import settings
from marketplace.services.chat_service import ChatService, job_context


def build_service(*, contractors=(), jobs=(), message_fail=False):
    rooms = FakeChatRoomRepository()
    messages = FakeChatMessageRepository(fail=message_fail)
    service = ChatService(
        room_repo=rooms,
        message_repo=messages,
        job_repo=FakeJobRepository(jobs),
        contractor_repo=FakeContractorRepository(contractors),
    )
    return service, rooms, messages


def assigned_job(contractor, **overrides):
    return make_job(status="assigned", selected_contractor_id=contractor.id, **overrides)


class TestGeneralRoom:
    async def test_get_or_create_is_idempotent(self, db):
        service, rooms, _ = build_service()
        contractor_id, client_id = uuid.uuid4(), uuid.uuid4()

        first_id, first_created = await service.get_or_create_general_room(db, contractor_id, client_id)
        second_id, second_created = await service.get_or_create_general_room(db, contractor_id, client_id)

        assert first_created is True
        assert second_created is False
        assert first_id == second_id
        assert len(rooms.rooms) == 1

    async def test_concurrent_calls_share_one_room(self, db):
        service, rooms, _ = build_service()
        contractor_id, client_id = uuid.uuid4(), uuid.uuid4()

        results = await asyncio.gather(
            service.get_or_create_general_room(db, contractor_id, client_id),
            service.get_or_create_general_room(db, contractor_id, client_id),
        )

        assert results[0][0] == results[1][0]
        assert sorted(created for _, created in results) == [False, True]
        assert len(rooms.rooms) == 1

    async def test_pair_is_directional(self, db):
        service, rooms, _ = build_service()
        a, b = uuid.uuid4(), uuid.uuid4()

        await service.get_or_create_general_room(db, a, b)
        await service.get_or_create_general_room(db, b, a)

        assert len(rooms.rooms) == 2

    async def test_welcome_message_posted_for_job(self, db):
        service, _, messages = build_service()
        contractor_id = uuid.uuid4()
        job = make_job(category_name="Plumbing", description="Leaking under the sink")

        room_id, _ = await service.get_or_create_general_room(
            db, contractor_id, job.posted_by_user_id, job=job, contractor_name="Brian"
        )

        [welcome] = messages.messages
        assert welcome.room_id == room_id
        assert welcome.sender_user_id == contractor_id
        assert welcome.sender_name == "Brian"
        assert welcome.content == settings.welcome_message
        assert welcome.job_reference_id == job.id
        assert welcome.job_context == "Plumbing - Leaking under the sink"

    async def test_no_welcome_message_without_job(self, db):
        service, _, messages = build_service()
        await service.get_or_create_general_room(db, uuid.uuid4(), uuid.uuid4())
        assert messages.messages == []

    async def test_welcome_failure_keeps_room(self, db):
        service, rooms, _ = build_service(message_fail=True)

        room_id, created = await service.get_or_create_general_room(
            db, uuid.uuid4(), uuid.uuid4(), job=make_job()
        )

        assert created is True
        assert room_id in rooms.rooms
        assert db.savepoint_rollbacks == 1
        assert db.commits == 1

    def test_job_context_defaults(self):
        assert job_context(None) is None
        assert job_context(make_job(category_name=None, description=None, title="Fix sink")) == "General - Fix sink"


class TestReconcile:
    async def test_creates_missing_rooms_and_isolates_failures(self, db):
        contractors = [make_contractor(full_name=f"Contractor {i}") for i in range(3)]
        jobs = [assigned_job(c) for c in contractors]
        orphan = make_job(status="assigned", selected_contractor_id=uuid.uuid4())
        open_job = make_job(status="open", selected_contractor_id=contractors[0].id)
        service, rooms, messages = build_service(contractors=contractors, jobs=jobs + [orphan, open_job])

        result = await service.reconcile_assigned_jobs(db)

        assert result.checked == 4
        assert result.created == 3
        assert result.existing == 0
        assert len(result.errors) == 1
        assert result.errors[0].job_id == orphan.id
        assert result.errors[0].error == "Contractor profile not found"
        assert len(rooms.rooms) == 3
        assert len(messages.messages) == 3
        assert db.commits == 1

    async def test_rooms_use_participant_user_ids(self, db):
        contractor = make_contractor()
        job = assigned_job(contractor)
        service, rooms, _ = build_service(contractors=[contractor], jobs=[job])

        await service.reconcile_assigned_jobs(db)

        [room] = rooms.rooms.values()
        assert room.contractor_id == contractor.user_id
        assert room.client_id == job.posted_by_user_id

    async def test_second_sweep_finds_existing_rooms(self, db):
        contractor = make_contractor()
        service, _, messages = build_service(contractors=[contractor], jobs=[assigned_job(contractor)])

        await service.reconcile_assigned_jobs(db)
        second = await service.reconcile_assigned_jobs(db)

        assert second.created == 0
        assert second.existing == 1
        assert len(messages.messages) == 1

    async def test_database_error_on_one_job(self, db):
        good, bad = make_contractor(), make_contractor()
        bad_job = assigned_job(bad)
        service, rooms, _ = build_service(contractors=[good, bad], jobs=[assigned_job(good), bad_job])
        rooms.fail_for.add((bad.user_id, bad_job.posted_by_user_id))

        result = await service.reconcile_assigned_jobs(db)

        assert result.created == 1
        assert [e.job_id for e in result.errors] == [bad_job.id]
        assert db.savepoint_rollbacks == 1
