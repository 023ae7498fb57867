"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.vitelis.api.dependencies.db import DBSession
from src.vitelis.repositories import (
    AnalyzeRepository,
    ChatRepository,
    DataCollectionQueryRepository,
    GenerationStepRepository,
    IndustryRepository,
    MessageRepository,
    ReportOrchestratorRepository,
    ReportRepository,
    ReportSettingsRepository,
    ReportStepRepository,
    ReportStepStatusRepository,
    SalesMinerAnalyzeRepository,
    UserRepository,
    ValidatorSettingsRepository,
    VitelisSalesAnalyzeRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_analyze_repository(session: DBSession) -> AnalyzeRepository:
    return AnalyzeRepository(session)


def get_sales_miner_repository(session: DBSession) -> SalesMinerAnalyzeRepository:
    return SalesMinerAnalyzeRepository(session)


def get_vitelis_sales_repository(session: DBSession) -> VitelisSalesAnalyzeRepository:
    return VitelisSalesAnalyzeRepository(session)


def get_chat_repository(session: DBSession) -> ChatRepository:
    return ChatRepository(session)


def get_message_repository(session: DBSession) -> MessageRepository:
    return MessageRepository(session)


def get_report_repository(session: DBSession) -> ReportRepository:
    return ReportRepository(session)


def get_industry_repository(session: DBSession) -> IndustryRepository:
    return IndustryRepository(session)


def get_report_settings_repository(session: DBSession) -> ReportSettingsRepository:
    return ReportSettingsRepository(session)


def get_validator_settings_repository(session: DBSession) -> ValidatorSettingsRepository:
    return ValidatorSettingsRepository(session)


def get_query_repository(session: DBSession) -> DataCollectionQueryRepository:
    return DataCollectionQueryRepository(session)


def get_generation_step_repository(session: DBSession) -> GenerationStepRepository:
    return GenerationStepRepository(session)


def get_report_step_repository(session: DBSession) -> ReportStepRepository:
    return ReportStepRepository(session)


def get_step_status_repository(session: DBSession) -> ReportStepStatusRepository:
    return ReportStepStatusRepository(session)


def get_orchestrator_repository(session: DBSession) -> ReportOrchestratorRepository:
    return ReportOrchestratorRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
AnalyzeRepo = Annotated[AnalyzeRepository, Depends(get_analyze_repository)]
SalesMinerRepo = Annotated[SalesMinerAnalyzeRepository, Depends(get_sales_miner_repository)]
VitelisSalesRepo = Annotated[
    VitelisSalesAnalyzeRepository, Depends(get_vitelis_sales_repository)
]
ChatRepo = Annotated[ChatRepository, Depends(get_chat_repository)]
MessageRepo = Annotated[MessageRepository, Depends(get_message_repository)]
ReportRepo = Annotated[ReportRepository, Depends(get_report_repository)]
IndustryRepo = Annotated[IndustryRepository, Depends(get_industry_repository)]
ReportSettingsRepo = Annotated[ReportSettingsRepository, Depends(get_report_settings_repository)]
ValidatorSettingsRepo = Annotated[
    ValidatorSettingsRepository, Depends(get_validator_settings_repository)
]
QueryRepo = Annotated[DataCollectionQueryRepository, Depends(get_query_repository)]
GenerationStepRepo = Annotated[GenerationStepRepository, Depends(get_generation_step_repository)]
ReportStepRepo = Annotated[ReportStepRepository, Depends(get_report_step_repository)]
StepStatusRepo = Annotated[ReportStepStatusRepository, Depends(get_step_status_repository)]
OrchestratorRepo = Annotated[ReportOrchestratorRepository, Depends(get_orchestrator_repository)]
