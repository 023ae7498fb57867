"""Startup bootstrap: ensure the root admin account exists.

Runs once per process from the application lifespan. Every step checks the
database instead of process memory, so running it on several instances or
restarting is harmless.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.vitelis.core.config import Settings
from src.vitelis.core.logging import get_logger
from src.vitelis.core.security import hash_password
from src.vitelis.models import User, UserRole
from src.vitelis.repositories import UserRepository

logger = get_logger(__name__)


class BootstrapService:
    def __init__(self, user_repo: UserRepository, session: AsyncSession, settings: Settings):
        self.user_repo = user_repo
        self.session = session
        self.settings = settings

    async def ensure_root_admin(self) -> User | None:
        """Create the root admin from settings if it does not exist yet.

        Returns the root user, or None when no root credentials are configured.
        An existing account is left untouched (its password is not reset).
        """
        email = self.settings.root_user_email
        password = self.settings.root_user_password
        if not email or not password:
            logger.info("root_admin_skipped", reason="not_configured")
            return None

        existing = await self.user_repo.get_by_email(email)
        if existing is not None:
            logger.info("root_admin_present", user_id=str(existing.id))
            return existing

        user = User(
            email=email.strip().lower(),
            hashed_password=hash_password(password),
            company_name=self.settings.root_company_name,
            role=UserRole.ADMIN.value,
            is_active=True,
        )
        self.user_repo.add(user)
        try:
            await self.session.commit()
            await self.session.refresh(user)
        except IntegrityError:
            # Another instance created it first
            await self.session.rollback()
            return await self.user_repo.get_by_email(email)

        logger.info("root_admin_created", user_id=str(user.id))
        return user

    async def run(self) -> None:
        await self.ensure_root_admin()
