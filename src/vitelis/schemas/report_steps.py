"""Schemas for the step catalog, report step configuration, status matrix and orchestrator."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from src.vitelis.models.enums import StepStatus


def _upper_status(v: Any) -> Any:
    return v.strip().upper() if isinstance(v, str) else v


# --- Catalog ---


class GenerationStepRead(BaseModel):
    id: int
    name: str
    url: str
    dependency: str | None
    settings: dict[str, str] | None

    model_config = {"from_attributes": True}


class GenerationStepCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    url: str = Field(min_length=1, max_length=500)
    dependency: str | None = Field(default=None, max_length=200)
    settings: dict[str, str] | None = None


class StepSettingsUpdate(BaseModel):
    """Full replacement of a step's settings; ``{}`` or null clears them."""

    settings: dict[str, str] | None = None


# --- Report configuration ---


class ConfiguredStepRead(GenerationStepRead):
    order: int


class ReportStepsRead(BaseModel):
    configured: list[ConfiguredStepRead]
    available: list[GenerationStepRead]


class AddStepRequest(BaseModel):
    step_id: int = Field(ge=1)


class AddStepResponse(BaseModel):
    id: int
    name: str
    order: int


class StepOrderUpdate(BaseModel):
    order: int = Field(ge=1)


class StepsReorderRequest(BaseModel):
    ordered_step_ids: list[int] = Field(min_length=1)

    @field_validator("ordered_step_ids")
    @classmethod
    def validate_unique(cls, v: list[int]) -> list[int]:
        if len(set(v)) != len(v):
            raise ValueError("ordered_step_ids must not contain duplicates")
        return v


# --- Status matrix ---


class MatrixCompany(BaseModel):
    id: int
    name: str


class MatrixStep(BaseModel):
    id: int
    name: str
    order: int


class MatrixCell(BaseModel):
    step_id: int
    status: StepStatus


class MatrixRow(BaseModel):
    company_id: int
    statuses: list[MatrixCell]


class StepsMatrix(BaseModel):
    companies: list[MatrixCompany]
    steps: list[MatrixStep]
    matrix: list[MatrixRow]


class StepStatusUpdate(BaseModel):
    company_id: int
    step_id: int
    status: StepStatus
    metadata: dict[str, Any] | None = None

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: Any) -> Any:
        return _upper_status(v)


class StepStatusItem(BaseModel):
    step_id: int
    status: StepStatus
    metadata: dict[str, Any] | None = None

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: Any) -> Any:
        return _upper_status(v)


class BulkStepStatusUpdate(BaseModel):
    updates: list[StepStatusItem] = Field(min_length=1)


class StepStatusRead(BaseModel):
    report_id: int
    company_id: int
    step_id: int
    status: StepStatus
    metadata: dict[str, Any] | None
    updated_at: datetime


class CompanyStepStatusRead(BaseModel):
    step_id: int
    step_name: str
    status: StepStatus
    metadata: dict[str, Any] | None
    updated_at: datetime


class StepOverview(BaseModel):
    step_id: int
    name: str
    order: int
    counts: dict[StepStatus, int]


# --- Orchestrator ---


class OrchestratorRead(BaseModel):
    report_id: int
    status: StepStatus
    metadata: dict[str, Any] | None


class OrchestratorUpdate(BaseModel):
    """Status overwrites; metadata is a patch where null values delete keys."""

    status: StepStatus | None = None
    metadata: dict[str, Any] | None = None

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: Any) -> Any:
        return _upper_status(v)


class OrchestratorStart(BaseModel):
    parallel_limit: int = Field(default=1, ge=1, le=100)


class EngineTickRequest(BaseModel):
    instance: int = Field(default=1, ge=1)


class EngineTickResponse(BaseModel):
    accepted: bool
    report_id: int
    channel: str


class OrchestratorStartResponse(BaseModel):
    status: StepStatus
    steps: list[int]


class OperationResult(BaseModel):
    success: bool = True
    updated: int | None = None
