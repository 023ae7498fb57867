"""FastAPI dependency injection definitions.

Re-exports all dependencies so routers import from one place.
"""

# Auth
from src.vitelis.api.dependencies.auth import (
    AdminUser,
    CurrentUser,
    get_current_user,
    require_admin,
)

# Database
from src.vitelis.api.dependencies.db import DBSession, get_db_session

# Repositories
from src.vitelis.api.dependencies.repositories import (
    AnalyzeRepo,
    ChatRepo,
    GenerationStepRepo,
    IndustryRepo,
    MessageRepo,
    OrchestratorRepo,
    QueryRepo,
    ReportRepo,
    ReportSettingsRepo,
    ReportStepRepo,
    SalesMinerRepo,
    StepStatusRepo,
    UserRepo,
    ValidatorSettingsRepo,
    VitelisSalesRepo,
)

# Services
from src.vitelis.api.dependencies.services import (
    AnalyzeServiceDep,
    AuthServiceDep,
    ChatServiceDep,
    CreditsServiceDep,
    N8NServiceDep,
    Notifier,
    OrchestratorServiceDep,
    ReportConfigServiceDep,
    ReportServiceDep,
    ReportStepsServiceDep,
    SalesMinerServiceDep,
    Storage,
    UserServiceDep,
    VitelisSalesServiceDep,
    WebhookServiceDep,
    get_engine_notifier,
    get_n8n_service,
    get_object_storage,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Auth
    "AdminUser",
    "CurrentUser",
    "get_current_user",
    "require_admin",
    # Repositories
    "AnalyzeRepo",
    "ChatRepo",
    "GenerationStepRepo",
    "IndustryRepo",
    "MessageRepo",
    "OrchestratorRepo",
    "QueryRepo",
    "ReportRepo",
    "ReportSettingsRepo",
    "ReportStepRepo",
    "SalesMinerRepo",
    "StepStatusRepo",
    "UserRepo",
    "ValidatorSettingsRepo",
    "VitelisSalesRepo",
    # Services
    "AnalyzeServiceDep",
    "AuthServiceDep",
    "ChatServiceDep",
    "CreditsServiceDep",
    "N8NServiceDep",
    "Notifier",
    "OrchestratorServiceDep",
    "ReportConfigServiceDep",
    "ReportServiceDep",
    "ReportStepsServiceDep",
    "SalesMinerServiceDep",
    "Storage",
    "UserServiceDep",
    "VitelisSalesServiceDep",
    "WebhookServiceDep",
    "get_engine_notifier",
    "get_n8n_service",
    "get_object_storage",
]
