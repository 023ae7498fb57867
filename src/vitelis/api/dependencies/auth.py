"""Authentication and authorization dependencies."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from src.vitelis.api.dependencies.repositories import UserRepo
from src.vitelis.core.logging import bind_user_context
from src.vitelis.core.security import decode_token
from src.vitelis.models import User


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


async def get_current_user(
    user_repo: UserRepo,
    authorization: Annotated[str | None, Header()] = None,
) -> User:
    """Validate the bearer access token and return the active user."""
    if not authorization or not authorization.startswith("Bearer "):
        raise _unauthorized("Missing or invalid authorization header")

    payload = decode_token(authorization[7:])
    if payload is None:
        raise _unauthorized("Invalid or expired token")
    if payload.get("type") != "access":
        raise _unauthorized("Invalid token type")

    user_id = payload.get("sub")
    if not user_id:
        raise _unauthorized("Invalid token payload")
    try:
        user_uuid = UUID(user_id)
    except ValueError as e:
        raise _unauthorized("Invalid user_id in token") from e

    user = await user_repo.get_by_id(user_uuid)
    if user is None or not user.is_active:
        raise _unauthorized("User not found or inactive")

    bind_user_context(user.id, user.role)
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


async def require_admin(current_user: CurrentUser) -> User:
    """Require role=admin. The role is read from the database, not the token."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin role required for this operation",
        )
    return current_user


AdminUser = Annotated[User, Depends(require_admin)]
