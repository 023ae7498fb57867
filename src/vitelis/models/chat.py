"""Chat conversations, unrelated to the analysis pipeline."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.vitelis.models.base import utc_now
from src.vitelis.models.enums import MessageRole


class Chat(SQLModel, table=True):
    """Conversation header. ``message_count`` and ``last_message`` are denormalized."""

    __tablename__ = "chats"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", index=True)
    title: str = Field(max_length=200)
    preview: str | None = Field(default=None, max_length=500)
    message_count: int = Field(default=0)
    last_message: str | None = Field(default=None, max_length=500)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Message(SQLModel, table=True):
    __tablename__ = "messages"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    chat_id: UUID = Field(foreign_key="chats.id", index=True)
    content: str
    role: str = Field(default=MessageRole.USER.value, max_length=20)
    timestamp: datetime = Field(default_factory=utc_now)
