"""Shared helpers for tests."""

from src.vitelis.core.security import create_access_token
from src.vitelis.models import User


def auth_headers(user: User) -> dict[str, str]:
    """Bearer header carrying a fresh access token for ``user``."""
    token = create_access_token(user.id, user.email, user.role)
    return {"Authorization": f"Bearer {token}"}
