"""Shared enums for models."""

from enum import Enum


class UserRole(str, Enum):
    """Account role. Only USER accounts are metered by credits."""

    USER = "user"
    ADMIN = "admin"


class AnalyzeStatus(str, Enum):
    """Lifecycle of a requested analysis record."""

    PROGRESS = "progress"
    FINISHED = "finished"
    ERROR = "error"
    CANCELED = "canceled"


class ExecutionStatus(str, Enum):
    """Status of the external workflow run, as reported by webhooks."""

    STARTED = "started"
    IN_PROGRESS = "inProgress"
    FINISHED = "finished"
    ERROR = "error"
    CANCELED = "canceled"


class StepStatus(str, Enum):
    """Status of one (company, step) cell and of a report orchestrator."""

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    DONE = "DONE"
    ERROR = "ERROR"


class AnalysisKind(str, Enum):
    """Workflow families that report back through webhooks."""

    BIZMINER = "bizminer"
    SALESMINER = "salesminer"
    VITELIS_SALES = "vitelis_sales"


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
