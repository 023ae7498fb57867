"""Chat conversations and their messages."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.vitelis.api.dependencies import ChatServiceDep, CurrentUser
from src.vitelis.schemas.chat import (
    ChatCreate,
    ChatDetail,
    ChatRead,
    ChatUpdate,
    MessageCreate,
    MessageRead,
)
from src.vitelis.schemas.pagination import PaginatedResponse

router = APIRouter(prefix="/chats", tags=["chats"])
messages_router = APIRouter(prefix="/messages", tags=["chats"])


@router.get("", response_model=PaginatedResponse[ChatRead])
async def list_chats(
    current_user: CurrentUser,
    service: ChatServiceDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> PaginatedResponse[ChatRead]:
    chats, total = await service.list_for_user(current_user, page, limit)
    return PaginatedResponse(
        items=[ChatRead.model_validate(c) for c in chats],
        total=total,
        page=page,
        limit=limit,
        has_more=page * limit < total,
    )


@router.post("", response_model=ChatRead, status_code=status.HTTP_201_CREATED)
async def create_chat(
    data: ChatCreate, current_user: CurrentUser, service: ChatServiceDep
) -> ChatRead:
    return ChatRead.model_validate(await service.create(data, current_user))


@router.get("/{chat_id}", response_model=ChatDetail)
async def get_chat(chat_id: UUID, current_user: CurrentUser, service: ChatServiceDep) -> ChatDetail:
    """Chat header with its messages in chronological order."""
    chat = await service.get_for_user(chat_id, current_user)
    messages = await service.list_messages(chat)
    return ChatDetail(
        **ChatRead.model_validate(chat).model_dump(),
        messages=[MessageRead.model_validate(m) for m in messages],
    )


@router.patch("/{chat_id}", response_model=ChatRead)
async def update_chat(
    chat_id: UUID, data: ChatUpdate, current_user: CurrentUser, service: ChatServiceDep
) -> ChatRead:
    chat = await service.get_for_user(chat_id, current_user)
    return ChatRead.model_validate(await service.update(chat, data))


@router.delete("/{chat_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_chat(chat_id: UUID, current_user: CurrentUser, service: ChatServiceDep) -> None:
    chat = await service.get_for_user(chat_id, current_user)
    await service.delete(chat)


@messages_router.get("", response_model=list[MessageRead])
async def list_messages(
    chat_id: UUID, current_user: CurrentUser, service: ChatServiceDep
) -> list[MessageRead]:
    chat = await service.get_for_user(chat_id, current_user)
    return [MessageRead.model_validate(m) for m in await service.list_messages(chat)]


@messages_router.post("", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
async def add_message(
    data: MessageCreate, current_user: CurrentUser, service: ChatServiceDep
) -> MessageRead:
    """Append a message; the chat's message_count and last_message follow."""
    return MessageRead.model_validate(await service.add_message(data, current_user))
