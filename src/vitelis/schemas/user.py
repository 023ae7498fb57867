from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.vitelis.models.enums import UserRole


def _normalize_usercases(v: list[str] | None) -> list[str] | None:
    if v is None:
        return None
    seen: list[str] = []
    for label in (item.strip() for item in v):
        if label and label not in seen:
            seen.append(label)
    return seen


class UserRead(BaseModel):
    id: UUID
    email: str
    company_name: str
    first_name: str | None
    last_name: str | None
    logo: str | None
    role: UserRole
    is_active: bool
    credits: int
    usercases: list[str]
    last_login: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class UserCreate(BaseModel):
    """Admin-side account creation."""

    email: EmailStr
    password: str = Field(min_length=8, max_length=100)
    company_name: str = Field(min_length=1, max_length=200)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    logo: str | None = Field(default=None, max_length=500)
    role: UserRole = UserRole.USER
    is_active: bool = True
    credits: int = Field(default=0, ge=0)
    usercases: list[str] = Field(default_factory=list)

    @field_validator("usercases")
    @classmethod
    def normalize_usercases(cls, v: list[str] | None) -> list[str] | None:
        return _normalize_usercases(v)


class UserUpdate(BaseModel):
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=8, max_length=100)
    company_name: str | None = Field(default=None, min_length=1, max_length=200)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    logo: str | None = Field(default=None, max_length=500)
    role: UserRole | None = None
    is_active: bool | None = None
    credits: int | None = Field(default=None, ge=0)
    usercases: list[str] | None = None

    @field_validator("usercases")
    @classmethod
    def normalize_usercases(cls, v: list[str] | None) -> list[str] | None:
        return _normalize_usercases(v)


class CreditsRead(BaseModel):
    """Credit balance as shown to the caller; admins are not metered."""

    should_display_credits: bool
    current_credits: int
    user_role: UserRole


class CreditsAdjustRequest(BaseModel):
    operation: str = Field(pattern="^(add|set|deduct)$")
    amount: int = Field(ge=0)


class CreditsAdjustResponse(BaseModel):
    success: bool
    credits: int
