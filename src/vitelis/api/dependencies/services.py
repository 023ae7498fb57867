"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.vitelis.api.dependencies.db import DBSession
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
from src.vitelis.core.config import get_settings
from src.vitelis.core.storage import ObjectStorage, get_storage
from src.vitelis.models import AnalysisKind
from src.vitelis.services import (
    AnalyzeService,
    AuthService,
    ChatService,
    CreditsService,
    EngineNotifier,
    N8NService,
    OrchestratorService,
    PgNotifyEngineNotifier,
    ReportConfigService,
    ReportService,
    ReportStepsService,
    UserService,
    WebhookService,
)


def get_object_storage() -> ObjectStorage:
    """S3 storage; overridden in tests."""
    return get_storage()


def get_engine_notifier(session: DBSession) -> EngineNotifier:
    return PgNotifyEngineNotifier(session)


Storage = Annotated[ObjectStorage, Depends(get_object_storage)]
Notifier = Annotated[EngineNotifier, Depends(get_engine_notifier)]


def get_user_service(user_repo: UserRepo, session: DBSession) -> UserService:
    return UserService(user_repo, session)


def get_auth_service(user_repo: UserRepo, session: DBSession) -> AuthService:
    return AuthService(user_repo, session)


def get_credits_service(user_repo: UserRepo, session: DBSession) -> CreditsService:
    return CreditsService(user_repo, session)


CreditsServiceDep = Annotated[CreditsService, Depends(get_credits_service)]


def get_analyze_service(
    repo: AnalyzeRepo, credits_service: CreditsServiceDep, session: DBSession
) -> AnalyzeService:
    return AnalyzeService(repo, credits_service, session, AnalysisKind.BIZMINER)


def get_sales_miner_service(
    repo: SalesMinerRepo, credits_service: CreditsServiceDep, session: DBSession
) -> AnalyzeService:
    return AnalyzeService(repo, credits_service, session, AnalysisKind.SALESMINER)


def get_vitelis_sales_service(
    repo: VitelisSalesRepo, credits_service: CreditsServiceDep, session: DBSession
) -> AnalyzeService:
    return AnalyzeService(repo, credits_service, session, AnalysisKind.VITELIS_SALES)


def get_webhook_service(
    analyze_repo: AnalyzeRepo,
    sales_miner_repo: SalesMinerRepo,
    vitelis_sales_repo: VitelisSalesRepo,
    session: DBSession,
    storage: Storage,
) -> WebhookService:
    return WebhookService(analyze_repo, sales_miner_repo, vitelis_sales_repo, session, storage)


def get_chat_service(
    chat_repo: ChatRepo, message_repo: MessageRepo, session: DBSession
) -> ChatService:
    return ChatService(chat_repo, message_repo, session)


def get_report_service(report_repo: ReportRepo, industry_repo: IndustryRepo) -> ReportService:
    return ReportService(report_repo, industry_repo)


def get_report_config_service(
    report_repo: ReportRepo,
    report_settings_repo: ReportSettingsRepo,
    validator_settings_repo: ValidatorSettingsRepo,
    query_repo: QueryRepo,
    session: DBSession,
) -> ReportConfigService:
    return ReportConfigService(
        report_repo, report_settings_repo, validator_settings_repo, query_repo, session
    )


def get_report_steps_service(
    step_repo: GenerationStepRepo,
    report_step_repo: ReportStepRepo,
    status_repo: StepStatusRepo,
    report_repo: ReportRepo,
    session: DBSession,
) -> ReportStepsService:
    return ReportStepsService(step_repo, report_step_repo, status_repo, report_repo, session)


def get_orchestrator_service(
    orchestrator_repo: OrchestratorRepo,
    report_step_repo: ReportStepRepo,
    report_repo: ReportRepo,
    session: DBSession,
    notifier: Notifier,
) -> OrchestratorService:
    return OrchestratorService(
        orchestrator_repo, report_step_repo, report_repo, session, get_settings(), notifier
    )


def get_n8n_service() -> N8NService:
    return N8NService(get_settings())


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
AnalyzeServiceDep = Annotated[AnalyzeService, Depends(get_analyze_service)]
SalesMinerServiceDep = Annotated[AnalyzeService, Depends(get_sales_miner_service)]
VitelisSalesServiceDep = Annotated[AnalyzeService, Depends(get_vitelis_sales_service)]
WebhookServiceDep = Annotated[WebhookService, Depends(get_webhook_service)]
ChatServiceDep = Annotated[ChatService, Depends(get_chat_service)]
ReportServiceDep = Annotated[ReportService, Depends(get_report_service)]
ReportConfigServiceDep = Annotated[ReportConfigService, Depends(get_report_config_service)]
ReportStepsServiceDep = Annotated[ReportStepsService, Depends(get_report_steps_service)]
OrchestratorServiceDep = Annotated[OrchestratorService, Depends(get_orchestrator_service)]
N8NServiceDep = Annotated[N8NService, Depends(get_n8n_service)]
