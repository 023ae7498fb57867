"""Repositories for chats and messages."""

from uuid import UUID

from sqlmodel import col, select

from src.vitelis.models import Chat, Message
from src.vitelis.repositories.base import BaseRepository


class ChatRepository(BaseRepository[Chat]):
    model = Chat

    async def list_for_user(self, user_id: UUID, page: int, limit: int) -> tuple[list[Chat], int]:
        query = select(Chat).where(Chat.user_id == user_id)
        return await self.paginate(query, page, limit, col(Chat.updated_at).desc())


class MessageRepository(BaseRepository[Message]):
    model = Message

    async def list_for_chat(self, chat_id: UUID) -> list[Message]:
        result = await self.session.execute(
            select(Message).where(Message.chat_id == chat_id).order_by(col(Message.timestamp))
        )
        return list(result.scalars().all())

    async def delete_for_chat(self, chat_id: UUID) -> None:
        for message in await self.list_for_chat(chat_id):
            await self.session.delete(message)
