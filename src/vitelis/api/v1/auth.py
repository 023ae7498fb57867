"""Authentication endpoints."""

from fastapi import APIRouter, status
from starlette.requests import Request

from src.vitelis.api.dependencies import AuthServiceDep
from src.vitelis.core.rate_limit import limiter
from src.vitelis.schemas.auth import LoginRequest, LoginResponse, RegisterRequest
from src.vitelis.schemas.user import UserRead

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        200: {
            "description": "Successful authentication",
            "content": {
                "application/json": {
                    "example": {
                        "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                        "token_type": "bearer",
                        "user": {"email": "user@example.com", "role": "user"},
                    }
                }
            },
        },
        401: {"description": "Invalid credentials or inactive account"},
        429: {"description": "Too many login attempts"},
    },
)
@limiter.limit("5/minute")
async def login(
    request: Request, login_data: LoginRequest, service: AuthServiceDep
) -> LoginResponse:
    """Authenticate with email and password and return an access token."""
    return await service.authenticate(login_data.email, login_data.password)


@router.post(
    "/register",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Password too weak"},
        409: {"description": "Email already registered"},
    },
)
@limiter.limit("10/hour")
async def register(
    request: Request, data: RegisterRequest, service: AuthServiceDep
) -> UserRead:
    """Self-register a role=user account."""
    user = await service.register(data)
    return UserRead.model_validate(user)
