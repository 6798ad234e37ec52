"""
Chat repositories - data access for ChatRoom and ChatMessage entities.
"""
import uuid
from typing import Optional, Tuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.models.chat import ChatRoom, ChatMessage
from marketplace.repositories.base import BaseRepository


class ChatRoomRepository(BaseRepository[ChatRoom]):
    def __init__(self):
        super().__init__(ChatRoom)

    async def find_general(
        self,
        db: AsyncSession,
        contractor_id: UUID,
        client_id: UUID,
    ) -> Optional[ChatRoom]:
        """The general (job_id IS NULL) room for a contractor/client pair."""
        result = await db.execute(
            select(ChatRoom).where(
                ChatRoom.contractor_id == contractor_id,
                ChatRoom.client_id == client_id,
                ChatRoom.job_id.is_(None),
            )
        )
        return result.scalar_one_or_none()

    async def get_or_create_general(
        self,
        db: AsyncSession,
        contractor_id: UUID,
        client_id: UUID,
    ) -> Tuple[ChatRoom, bool]:
        """
        Idempotently fetch or create the general room.

        The insert targets the partial unique index, so two callers racing
        on the same pair end up with one row: the loser's insert is a no-op
        and it re-reads the winner's room.

        Returns:
            (room, created)
        """
        existing = await self.find_general(db, contractor_id, client_id)
        if existing:
            return existing, False

        stmt = (
            pg_insert(ChatRoom)
            .values(
                id=uuid.uuid4(),
                contractor_id=contractor_id,
                client_id=client_id,
                job_id=None,
            )
            .on_conflict_do_nothing(
                index_elements=[ChatRoom.contractor_id, ChatRoom.client_id],
                index_where=ChatRoom.job_id.is_(None),
            )
            .returning(ChatRoom.id)
        )
        result = await db.execute(stmt)
        inserted_id = result.scalar_one_or_none()

        room = await self.find_general(db, contractor_id, client_id)
        if room is None:
            raise RuntimeError(
                f"General chat room for contractor={contractor_id} client={client_id} "
                "vanished after upsert"
            )
        return room, inserted_id is not None


class ChatMessageRepository(BaseRepository[ChatMessage]):
    def __init__(self):
        super().__init__(ChatMessage)
