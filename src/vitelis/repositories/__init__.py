"""Repository layer - data access abstraction."""

from src.vitelis.repositories.analyze import (
    AnalyzeRecordRepository,
    AnalyzeRepository,
    SalesMinerAnalyzeRepository,
    VitelisSalesAnalyzeRepository,
)
from src.vitelis.repositories.base import BaseRepository
from src.vitelis.repositories.chat import ChatRepository, MessageRepository
from src.vitelis.repositories.report import IndustryRepository, ReportRepository
from src.vitelis.repositories.report_config import (
    DataCollectionQueryRepository,
    ReportSettingsRepository,
    ValidatorSettingsRepository,
)
from src.vitelis.repositories.report_steps import (
    GenerationStepRepository,
    ReportOrchestratorRepository,
    ReportStepRepository,
    ReportStepStatusRepository,
)
from src.vitelis.repositories.user import UserRepository

__all__ = [
    # Base
    "BaseRepository",
    # Users
    "UserRepository",
    # Analyses
    "AnalyzeRecordRepository",
    "AnalyzeRepository",
    "SalesMinerAnalyzeRepository",
    "VitelisSalesAnalyzeRepository",
    # Chats
    "ChatRepository",
    "MessageRepository",
    # Deep dives
    "IndustryRepository",
    "ReportRepository",
    "ReportSettingsRepository",
    "ValidatorSettingsRepository",
    "DataCollectionQueryRepository",
    # Report steps
    "GenerationStepRepository",
    "ReportOrchestratorRepository",
    "ReportStepRepository",
    "ReportStepStatusRepository",
]
