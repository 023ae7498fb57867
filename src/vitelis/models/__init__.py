"""Model exports.

Import from here: `from src.vitelis.models import User, Analyze`
"""

from src.vitelis.models.analyze import (
    Analyze,
    AnalyzeRecord,
    SalesMinerAnalyze,
    VitelisSalesAnalyze,
)
from src.vitelis.models.chat import Chat, Message
from src.vitelis.models.enums import (
    AnalysisKind,
    AnalyzeStatus,
    ExecutionStatus,
    MessageRole,
    StepStatus,
    UserRole,
)
from src.vitelis.models.report import (
    Company,
    DataCollectionQuery,
    Industry,
    Report,
    ReportCompany,
    ReportDataCollectionQuery,
    ReportSettings,
    ValidatorSettings,
)
from src.vitelis.models.steps import (
    GenerationStep,
    ReportOrchestrator,
    ReportStep,
    ReportStepStatus,
)
from src.vitelis.models.user import User

__all__ = [
    # Enums
    "AnalysisKind",
    "AnalyzeStatus",
    "ExecutionStatus",
    "MessageRole",
    "StepStatus",
    "UserRole",
    # Users
    "User",
    # Analyses
    "Analyze",
    "AnalyzeRecord",
    "SalesMinerAnalyze",
    "VitelisSalesAnalyze",
    # Chats
    "Chat",
    "Message",
    # Deep dives
    "Company",
    "Industry",
    "Report",
    "ReportCompany",
    "ReportSettings",
    "ValidatorSettings",
    "DataCollectionQuery",
    "ReportDataCollectionQuery",
    # Report steps
    "GenerationStep",
    "ReportOrchestrator",
    "ReportStep",
    "ReportStepStatus",
]
