"""Repository for User entity."""

from uuid import UUID

from sqlalchemy import update
from sqlmodel import col, select

from src.vitelis.models import User
from src.vitelis.models.base import utc_now
from src.vitelis.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email address (case-insensitive)."""
        result = await self.session.execute(
            select(User).where(User.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def exists_by_email(self, email: str) -> bool:
        """Check if a user with the given email exists."""
        user = await self.get_by_email(email)
        return user is not None

    async def list_users(self, page: int, limit: int) -> tuple[list[User], int]:
        return await self.paginate(select(User), page, limit, col(User.created_at).desc())

    async def get_by_ids(self, user_ids: list[UUID]) -> list[User]:
        if not user_ids:
            return []
        result = await self.session.execute(select(User).where(col(User.id).in_(user_ids)))
        return list(result.scalars().all())

    async def decrement_credits_if_sufficient(self, user_id: UUID, amount: int) -> bool:
        """Atomically subtract ``amount`` when the balance covers it.

        Single conditional UPDATE; returns False (no change) when the user
        is missing or has fewer than ``amount`` credits.
        """
        result = await self.session.execute(
            update(User)
            .where(col(User.id) == user_id, col(User.credits) >= amount)
            .values(credits=col(User.credits) - amount, updated_at=utc_now())
        )
        return bool(result.rowcount)  # type: ignore[attr-defined]

    async def increment_credits(self, user_id: UUID, amount: int) -> bool:
        result = await self.session.execute(
            update(User)
            .where(col(User.id) == user_id)
            .values(credits=col(User.credits) + amount, updated_at=utc_now())
        )
        return bool(result.rowcount)  # type: ignore[attr-defined]

    async def set_credits(self, user_id: UUID, amount: int) -> bool:
        result = await self.session.execute(
            update(User)
            .where(col(User.id) == user_id)
            .values(credits=amount, updated_at=utc_now())
        )
        return bool(result.rowcount)  # type: ignore[attr-defined]
