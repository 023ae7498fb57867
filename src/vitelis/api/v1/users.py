"""User management and credit endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.vitelis.api.dependencies import (
    AdminUser,
    CreditsServiceDep,
    CurrentUser,
    UserServiceDep,
)
from src.vitelis.core.exceptions import ValidationError
from src.vitelis.models import UserRole
from src.vitelis.schemas.pagination import PaginatedResponse
from src.vitelis.schemas.user import (
    CreditsAdjustRequest,
    CreditsAdjustResponse,
    CreditsRead,
    UserCreate,
    UserRead,
    UserUpdate,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserRead)
async def get_me(current_user: CurrentUser) -> UserRead:
    return UserRead.model_validate(current_user)


@router.get(
    "/credits",
    response_model=CreditsRead,
    responses={
        200: {
            "description": "Caller's credit balance",
            "content": {
                "application/json": {
                    "example": {
                        "should_display_credits": True,
                        "current_credits": 3,
                        "user_role": "user",
                    }
                }
            },
        },
    },
)
async def get_my_credits(current_user: CurrentUser, credits: CreditsServiceDep) -> CreditsRead:
    """Credit balance of the caller. Admins are not metered, so the UI hides it."""
    return CreditsRead(
        should_display_credits=not current_user.is_admin,
        current_credits=await credits.get_credits(current_user.id),
        user_role=UserRole(current_user.role),
    )


@router.get("", response_model=PaginatedResponse[UserRead])
async def list_users(
    admin: AdminUser,
    service: UserServiceDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> PaginatedResponse[UserRead]:
    users, total = await service.list_users(page, limit)
    return PaginatedResponse(
        items=[UserRead.model_validate(u) for u in users],
        total=total,
        page=page,
        limit=limit,
        has_more=page * limit < total,
    )


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Email already registered"}},
)
async def create_user(data: UserCreate, admin: AdminUser, service: UserServiceDep) -> UserRead:
    user = await service.create_user(data)
    return UserRead.model_validate(user)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: UUID, admin: AdminUser, service: UserServiceDep) -> UserRead:
    return UserRead.model_validate(await service.get_or_404(user_id))


@router.patch("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: UUID, data: UserUpdate, admin: AdminUser, service: UserServiceDep
) -> UserRead:
    user = await service.get_or_404(user_id)
    return UserRead.model_validate(await service.update(user, data))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: UUID, admin: AdminUser, service: UserServiceDep) -> None:
    user = await service.get_or_404(user_id)
    await service.delete(user)


@router.post(
    "/{user_id}/credits",
    response_model=CreditsAdjustResponse,
    responses={400: {"description": "Insufficient credits for deduct"}},
)
async def adjust_credits(
    user_id: UUID,
    data: CreditsAdjustRequest,
    admin: AdminUser,
    credits: CreditsServiceDep,
) -> CreditsAdjustResponse:
    """Add, set or deduct a user's credits."""
    if data.operation == "add":
        balance = await credits.add_credits(user_id, data.amount)
    elif data.operation == "set":
        balance = await credits.set_credits(user_id, data.amount)
    else:
        await credits.get_credits(user_id)  # 404 for unknown users
        if not await credits.deduct_credits(user_id, data.amount):
            raise ValidationError("Insufficient credits")
        balance = await credits.get_credits(user_id)
    return CreditsAdjustResponse(success=True, credits=balance)
