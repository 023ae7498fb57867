"""User factories for test data generation."""

from polyfactory import Use

from src.vitelis.core.security import hash_password
from src.vitelis.models import User, UserRole
from tests.factories.base import BaseFactory, generate_uuid, utc_now

# Default test password - stored for convenience in tests
DEFAULT_TEST_PASSWORD = "correct-horse-battery-staple-42"


class UserFactory(BaseFactory):
    """Factory for generating User test data."""

    __model__ = User

    id = Use(generate_uuid)
    email = Use(lambda: f"user_{generate_uuid().hex[-8:]}@example.com")
    hashed_password = Use(lambda: hash_password(DEFAULT_TEST_PASSWORD))
    company_name = "Acme Corp"
    first_name = "Test"
    last_name = "User"
    logo = None
    role = UserRole.USER.value
    is_active = True
    credits = 5
    usercases = Use(list)
    last_login = None
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def admin(cls, **kwargs):
        """Create an admin (never metered)."""
        return cls.build(
            role=UserRole.ADMIN.value,
            credits=kwargs.pop("credits", 0),
            company_name=kwargs.pop("company_name", "Vitelis"),
            **kwargs,
        )

    @classmethod
    def inactive(cls, **kwargs):
        """Create an inactive user."""
        return cls.build(is_active=False, **kwargs)
