"""Credit metering for role=user accounts."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.vitelis.core.exceptions import NotFoundError, ValidationError
from src.vitelis.core.logging import get_logger
from src.vitelis.models import ExecutionStatus, User
from src.vitelis.repositories import UserRepository

logger = get_logger(__name__)

# Refund granted when a running analysis fails
STATUS_CHANGE_REFUND = 1


class CreditsService:
    """Credit balance operations.

    Deduction is one conditional UPDATE, so concurrent requests can never
    drive a balance below zero. Admin accounts are never metered.
    """

    def __init__(self, user_repo: UserRepository, session: AsyncSession):
        self.user_repo = user_repo
        self.session = session

    async def _get_user(self, user_id: UUID) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    async def _refreshed_credits(self, user_id: UUID) -> int:
        user = await self._get_user(user_id)
        await self.session.refresh(user, attribute_names=["credits"])
        return user.credits

    async def get_credits(self, user_id: UUID) -> int:
        return await self._refreshed_credits(user_id)

    async def has_enough_credits(self, user_id: UUID, amount: int = 1) -> bool:
        user = await self._get_user(user_id)
        if user.is_admin:
            return True
        return await self._refreshed_credits(user_id) >= amount

    async def deduct_credits(self, user_id: UUID, amount: int = 1) -> bool:
        """Subtract ``amount`` if the balance covers it.

        Returns False without changing anything when the user is missing or
        the balance is short. Admins are exempt and always get True.
        """
        if amount < 0:
            raise ValidationError("Amount must be non-negative")

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            return False
        if user.is_admin:
            return True

        try:
            deducted = await self.user_repo.decrement_credits_if_sufficient(user_id, amount)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        if deducted:
            logger.info("credits_deducted", user_id=str(user_id), amount=amount)
        else:
            logger.info("credits_insufficient", user_id=str(user_id), amount=amount)
        return deducted

    async def add_credits(self, user_id: UUID, amount: int) -> int:
        """Unconditionally add credits. Returns the new balance."""
        if amount < 0:
            raise ValidationError("Amount must be non-negative")
        await self._get_user(user_id)
        try:
            await self.user_repo.increment_credits(user_id, amount)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("credits_added", user_id=str(user_id), amount=amount)
        return await self._refreshed_credits(user_id)

    async def set_credits(self, user_id: UUID, amount: int) -> int:
        """Unconditionally set the balance. Returns the new balance."""
        if amount < 0:
            raise ValidationError("Amount must be non-negative")
        await self._get_user(user_id)
        try:
            await self.user_repo.set_credits(user_id, amount)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("credits_set", user_id=str(user_id), amount=amount)
        return await self._refreshed_credits(user_id)

    async def handle_status_change_refund(
        self, user_id: UUID | None, old_status: str | None, new_status: str | None
    ) -> bool:
        """Refund one credit when a running analysis moves to error.

        Only inProgress -> error qualifies, and only for role=user accounts.
        Returns True when a refund was granted.
        """
        if user_id is None:
            return False
        if old_status != ExecutionStatus.IN_PROGRESS.value:
            return False
        if new_status != ExecutionStatus.ERROR.value:
            return False

        user = await self.user_repo.get_by_id(user_id)
        if user is None or user.is_admin:
            return False

        await self.add_credits(user_id, STATUS_CHANGE_REFUND)
        logger.info("credits_refunded", user_id=str(user_id), amount=STATUS_CHANGE_REFUND)
        return True
