"""Schemas for analysis records (BizMiner, SalesMiner, VitelisSales)."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.vitelis.models.enums import AnalyzeStatus, ExecutionStatus


class _RecordCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    company_name: str = Field(min_length=1, max_length=200)
    use_case: str | None = Field(default=None, max_length=200)
    status: AnalyzeStatus = AnalyzeStatus.PROGRESS
    current_step: int = Field(default=0, ge=0)
    execution_id: str | None = Field(default=None, max_length=255)
    execution_status: ExecutionStatus | None = None
    execution_step: int | None = Field(default=None, ge=0)

    @field_validator("company_name")
    @classmethod
    def validate_company_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Company name cannot be empty or whitespace only")
        return v


class _RecordUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    company_name: str | None = Field(default=None, min_length=1, max_length=200)
    use_case: str | None = Field(default=None, max_length=200)
    status: AnalyzeStatus | None = None
    current_step: int | None = Field(default=None, ge=0)
    execution_id: str | None = Field(default=None, max_length=255)
    execution_status: ExecutionStatus | None = None
    execution_step: int | None = Field(default=None, ge=0)


class _RecordRead(BaseModel):
    id: UUID
    company_name: str
    use_case: str | None
    user_id: UUID | None
    status: str
    current_step: int
    execution_id: str | None
    execution_status: str | None
    execution_step: int | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class _MinerRequest(BaseModel):
    business_line: str | None = Field(default=None, max_length=500)
    country: str | None = Field(default=None, max_length=100)
    timeline: str | None = Field(default=None, max_length=100)
    language: str | None = Field(default=None, max_length=50)
    additional_information: str | None = None


class AnalyzeCreate(_RecordCreate, _MinerRequest):
    pass


class AnalyzeUpdate(_RecordUpdate, _MinerRequest):
    result_text: str | None = None
    summary: str | None = None
    improvement_leverages: str | None = None
    head_to_head: str | None = None
    sources: str | None = None


class AnalyzeRead(_RecordRead, _MinerRequest):
    result_text: str | None
    summary: str | None
    improvement_leverages: str | None
    head_to_head: str | None
    sources: str | None


class SalesMinerAnalyzeCreate(_RecordCreate, _MinerRequest):
    pass


class SalesMinerAnalyzeUpdate(_RecordUpdate, _MinerRequest):
    result_text: str | None = None
    yaml_file: str | None = Field(default=None, max_length=500)


class SalesMinerAnalyzeRead(_RecordRead, _MinerRequest):
    result_text: str | None
    yaml_file: str | None


class VitelisSalesAnalyzeCreate(_RecordCreate):
    url: str | None = Field(default=None, max_length=500)
    industry_id: int | None = None
    company_id: int | None = None
    report_id: int | None = None


class VitelisSalesAnalyzeUpdate(_RecordUpdate):
    url: str | None = Field(default=None, max_length=500)
    industry_id: int | None = None
    docx_file: str | None = Field(default=None, max_length=500)
    company_id: int | None = None
    report_id: int | None = None
    generated_report_id: str | None = Field(default=None, max_length=255)


class VitelisSalesAnalyzeRead(_RecordRead):
    url: str | None
    industry_id: int | None
    docx_file: str | None
    company_id: int | None
    report_id: int | None
    generated_report_id: str | None
