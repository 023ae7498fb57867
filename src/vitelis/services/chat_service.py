from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.vitelis.core.exceptions import AuthorizationError, NotFoundError
from src.vitelis.core.logging import get_logger
from src.vitelis.models import Chat, Message, User
from src.vitelis.models.base import utc_now
from src.vitelis.repositories import ChatRepository, MessageRepository
from src.vitelis.schemas.chat import ChatCreate, ChatUpdate, MessageCreate

logger = get_logger(__name__)

# Length kept in Chat.last_message
LAST_MESSAGE_PREVIEW = 500


class ChatService:
    def __init__(
        self,
        chat_repo: ChatRepository,
        message_repo: MessageRepository,
        session: AsyncSession,
    ):
        self.chat_repo = chat_repo
        self.message_repo = message_repo
        self.session = session

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    async def get_for_user(self, chat_id: UUID, user: User) -> Chat:
        chat = await self.chat_repo.get_by_id(chat_id)
        if chat is None:
            raise NotFoundError(f"Chat {chat_id} not found")
        if not user.is_admin and chat.user_id != user.id:
            raise AuthorizationError("Access denied to this chat")
        return chat

    async def list_for_user(self, user: User, page: int, limit: int) -> tuple[list[Chat], int]:
        return await self.chat_repo.list_for_user(user.id, page, limit)

    async def create(self, data: ChatCreate, user: User) -> Chat:
        chat = Chat(user_id=user.id, title=data.title, preview=data.preview)
        self.chat_repo.add(chat)
        await self._commit()
        await self.session.refresh(chat)
        logger.info("chat_created", chat_id=str(chat.id))
        return chat

    async def update(self, chat: Chat, data: ChatUpdate) -> Chat:
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(chat, field, value)
        chat.updated_at = utc_now()
        await self._commit()
        await self.session.refresh(chat)
        return chat

    async def delete(self, chat: Chat) -> None:
        await self.message_repo.delete_for_chat(chat.id)
        await self.chat_repo.delete(chat)
        await self._commit()
        logger.info("chat_deleted", chat_id=str(chat.id))

    async def list_messages(self, chat: Chat) -> list[Message]:
        return await self.message_repo.list_for_chat(chat.id)

    async def add_message(self, data: MessageCreate, user: User) -> Message:
        """Append a message and refresh the chat's counters in the same transaction."""
        chat = await self.get_for_user(data.chat_id, user)

        message = Message(chat_id=chat.id, content=data.content, role=data.role)
        self.message_repo.add(message)
        chat.message_count += 1
        chat.last_message = data.content[:LAST_MESSAGE_PREVIEW]
        chat.updated_at = utc_now()

        await self._commit()
        await self.session.refresh(message)
        return message
