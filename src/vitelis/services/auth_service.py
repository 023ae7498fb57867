"""Authentication service - login and self-registration."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.vitelis.core.config import get_settings
from src.vitelis.core.exceptions import AuthenticationError
from src.vitelis.core.logging import get_logger
from src.vitelis.core.security import DUMMY_PASSWORD_HASH, create_access_token, verify_password
from src.vitelis.models import User, UserRole
from src.vitelis.repositories import UserRepository
from src.vitelis.schemas.auth import LoginResponse, RegisterRequest
from src.vitelis.schemas.user import UserCreate, UserRead
from src.vitelis.services.user_service import UserService

logger = get_logger(__name__)


class AuthService:
    """Authentication service.

    Passwords are only ever checked against their Argon2 hash.
    """

    def __init__(self, user_repo: UserRepository, session: AsyncSession):
        self.user_repo = user_repo
        self.session = session
        self.user_service = UserService(user_repo, session)

    async def authenticate(self, email: str, password: str) -> LoginResponse:
        """Verify credentials and issue an access token.

        Raises AuthenticationError for unknown email, wrong password, or
        inactive account, without saying which.
        """
        user = await self.user_repo.get_by_email(email)

        # Always verify to keep response time independent of account existence
        password_hash = user.hashed_password if user else DUMMY_PASSWORD_HASH
        password_valid = verify_password(password, password_hash)

        if user is None or not password_valid or not user.is_active:
            logger.info("login_failed", reason="invalid_credentials")
            raise AuthenticationError("Invalid email or password")

        await self.user_service.record_login(user)
        token = create_access_token(user.id, user.email, user.role)
        logger.info("login_succeeded", user_id=str(user.id))
        return LoginResponse(access_token=token, user=UserRead.model_validate(user))

    async def register(self, data: RegisterRequest) -> User:
        """Create a metered account with the configured starting credits."""
        settings = get_settings()
        return await self.user_service.create_user(
            UserCreate(
                email=data.email,
                password=data.password,
                company_name=data.company_name,
                first_name=data.first_name,
                last_name=data.last_name,
                role=UserRole.USER,
                credits=settings.default_user_credits,
            )
        )
