"""User model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Column
from sqlmodel import Field, SQLModel

from src.vitelis.models.base import JSONType, utc_now
from src.vitelis.models.enums import UserRole


class User(SQLModel, table=True):
    """Account that orders analyses. Credits are only metered for role=user."""

    __tablename__ = "users"
    __table_args__ = (CheckConstraint("credits >= 0", name="ck_users_credits_non_negative"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True)
    hashed_password: str = Field(max_length=255)
    company_name: str = Field(max_length=200)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    logo: str | None = Field(default=None, max_length=500)
    role: str = Field(default=UserRole.USER.value, max_length=20)
    is_active: bool = Field(default=True)
    credits: int = Field(default=0)
    usercases: list[str] = Field(default_factory=list, sa_column=Column(JSONType, nullable=False))
    last_login: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value
