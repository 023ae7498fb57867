from src.vitelis.schemas.auth import LoginRequest, LoginResponse, RegisterRequest
from src.vitelis.schemas.pagination import PaginatedResponse
from src.vitelis.schemas.report_steps import (
    OrchestratorRead,
    OrchestratorStartResponse,
    OrchestratorUpdate,
    ReportStepsRead,
    StepsMatrix,
)
from src.vitelis.schemas.user import UserCreate, UserRead, UserUpdate
from src.vitelis.schemas.webhook import WebhookResponse

__all__ = [
    # Auth
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    # Pagination
    "PaginatedResponse",
    # Report steps
    "OrchestratorRead",
    "OrchestratorStartResponse",
    "OrchestratorUpdate",
    "ReportStepsRead",
    "StepsMatrix",
    # User
    "UserCreate",
    "UserRead",
    "UserUpdate",
    # Webhooks
    "WebhookResponse",
]
