from src.vitelis.services.analyze_service import AnalyzeService
from src.vitelis.services.auth_service import AuthService
from src.vitelis.services.bootstrap_service import BootstrapService
from src.vitelis.services.chat_service import ChatService
from src.vitelis.services.credits_service import CreditsService
from src.vitelis.services.n8n_service import N8NService
from src.vitelis.services.orchestrator_service import (
    EngineNotifier,
    OrchestratorService,
    PgNotifyEngineNotifier,
)
from src.vitelis.services.report_config_service import ReportConfigService
from src.vitelis.services.report_service import ReportService
from src.vitelis.services.report_steps_service import ReportStepsService
from src.vitelis.services.user_service import UserService
from src.vitelis.services.webhook_service import WebhookService

__all__ = [
    "AnalyzeService",
    "AuthService",
    "BootstrapService",
    "ChatService",
    "CreditsService",
    "EngineNotifier",
    "N8NService",
    "OrchestratorService",
    "PgNotifyEngineNotifier",
    "ReportConfigService",
    "ReportService",
    "ReportStepsService",
    "UserService",
    "WebhookService",
]
