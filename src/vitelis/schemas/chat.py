from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.vitelis.models.enums import MessageRole


class ChatCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    preview: str | None = Field(default=None, max_length=500)


class ChatUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    preview: str | None = Field(default=None, max_length=500)


class ChatRead(BaseModel):
    id: UUID
    title: str
    preview: str | None
    message_count: int
    last_message: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MessageCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    chat_id: UUID
    content: str = Field(min_length=1)
    role: MessageRole = MessageRole.USER


class MessageRead(BaseModel):
    id: UUID
    chat_id: UUID
    content: str
    role: MessageRole
    timestamp: datetime

    model_config = {"from_attributes": True}


class ChatDetail(ChatRead):
    messages: list[MessageRead]
