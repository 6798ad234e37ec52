"""
Chat models - rooms between a contractor and a client, and their messages.
"""
import uuid
from typing import Optional, List
from sqlalchemy import String, Text, ForeignKey, Index, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from marketplace.models.base import BaseModel


class ChatRoom(BaseModel):
    """
    Chat room entity.

    A room with `job_id` NULL is the "general" room for a contractor/client
    pair and spans all of their jobs. The partial unique index guarantees at
    most one general room per (contractor_id, client_id); concurrent creators
    rely on it through INSERT ... ON CONFLICT DO NOTHING.
    """

    __tablename__ = "chat_rooms"

    __table_args__ = (
        Index(
            "uq_chat_rooms_general_pair",
            "contractor_id",
            "client_id",
            unique=True,
            postgresql_where=text("job_id IS NULL"),
        ),
    )

    # Participants (user ids)
    contractor_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
        index=True,
    )
    client_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
        index=True,
    )
    job_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("job_postings.id", ondelete="SET NULL"),
        nullable=True,
    )

    messages: Mapped[List["ChatMessage"]] = relationship(
        "ChatMessage",
        back_populates="room",
        cascade="all, delete-orphan",
        lazy="raise",
    )

    @property
    def is_general(self) -> bool:
        return self.job_id is None

    def other_participant(self, user_id: uuid.UUID) -> uuid.UUID:
        """The participant who is not `user_id`."""
        return self.client_id if self.contractor_id == user_id else self.contractor_id

    def __repr__(self) -> str:
        return f"<ChatRoom contractor={self.contractor_id} client={self.client_id} job={self.job_id}>"


class ChatMessage(BaseModel):
    """Chat message entity."""

    __tablename__ = "chat_messages"

    room_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("chat_rooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sender_user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
    )
    sender_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    # Display context for messages posted on behalf of a job
    job_reference_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        nullable=True,
    )
    job_context: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    room: Mapped["ChatRoom"] = relationship("ChatRoom", back_populates="messages")

    def __repr__(self) -> str:
        return f"<ChatMessage room={self.room_id} sender={self.sender_user_id}>"
