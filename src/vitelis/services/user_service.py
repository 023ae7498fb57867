from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.vitelis.core.exceptions import ConflictError, NotFoundError
from src.vitelis.core.logging import get_logger
from src.vitelis.core.security import hash_password
from src.vitelis.models import User
from src.vitelis.models.base import utc_now
from src.vitelis.repositories import UserRepository
from src.vitelis.schemas.user import UserCreate, UserUpdate

logger = get_logger(__name__)


class UserService:
    """User management service."""

    def __init__(self, user_repo: UserRepository, session: AsyncSession):
        self.user_repo = user_repo
        self.session = session

    async def get_by_id(self, user_id: UUID) -> User | None:
        """Get user by ID."""
        return await self.user_repo.get_by_id(user_id)

    async def get_or_404(self, user_id: UUID) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email."""
        return await self.user_repo.get_by_email(email)

    async def list_users(self, page: int, limit: int) -> tuple[list[User], int]:
        return await self.user_repo.list_users(page, limit)

    async def create_user(self, data: UserCreate) -> User:
        """Create an account. Emails are unique case-insensitively."""
        email = data.email.strip().lower()
        if await self.user_repo.exists_by_email(email):
            raise ConflictError("User with this email already exists")

        user = User(
            email=email,
            hashed_password=hash_password(data.password),
            company_name=data.company_name.strip(),
            first_name=data.first_name,
            last_name=data.last_name,
            logo=data.logo,
            role=data.role.value,
            is_active=data.is_active,
            credits=data.credits,
            usercases=list(data.usercases),
        )
        self.user_repo.add(user)

        try:
            await self.session.commit()
            await self.session.refresh(user)
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError("User with this email already exists") from e

        logger.info("user_created", user_id=str(user.id), role=user.role)
        return user

    async def update(self, user: User, data: UserUpdate) -> User:
        """Update user with provided data."""
        update_data = data.model_dump(exclude_unset=True)

        if "email" in update_data:
            email = update_data["email"].strip().lower()
            if email != user.email and await self.user_repo.exists_by_email(email):
                raise ConflictError("User with this email already exists")
            update_data["email"] = email

        if "password" in update_data:
            update_data["hashed_password"] = hash_password(update_data.pop("password"))

        if "role" in update_data and update_data["role"] is not None:
            update_data["role"] = update_data["role"].value

        for field, value in update_data.items():
            if value is None and field in ("email", "company_name", "role", "is_active", "credits"):
                continue
            setattr(user, field, value)

        user.updated_at = utc_now()
        try:
            await self.session.commit()
            await self.session.refresh(user)
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError("User with this email already exists") from e
        return user

    async def delete(self, user: User) -> None:
        """Hard-delete an account (admin only)."""
        await self.user_repo.delete(user)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError("Cannot delete user due to existing references") from e
        logger.info("user_deleted", user_id=str(user.id))

    async def record_login(self, user: User) -> None:
        user.last_login = utc_now()
        await self.session.commit()
