"""Analysis request records correlated with external workflow executions."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.vitelis.models.base import utc_now
from src.vitelis.models.enums import AnalyzeStatus


class AnalyzeBase(SQLModel):
    """Fields shared by every analysis family.

    ``execution_id`` is the sole correlation key for webhook updates.
    """

    company_name: str = Field(max_length=200)
    use_case: str | None = Field(default=None, max_length=200)
    user_id: UUID | None = Field(default=None, foreign_key="users.id", index=True)
    status: str = Field(default=AnalyzeStatus.PROGRESS.value, max_length=20)
    current_step: int = Field(default=0)
    execution_id: str | None = Field(default=None, max_length=255, index=True)
    execution_status: str | None = Field(default=None, max_length=20)
    execution_step: int | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class MinerRequestFields(SQLModel):
    """Request parameters shared by BizMiner and SalesMiner."""

    business_line: str | None = Field(default=None, max_length=500)
    country: str | None = Field(default=None, max_length=100)
    timeline: str | None = Field(default=None, max_length=100)
    language: str | None = Field(default=None, max_length=50)
    additional_information: str | None = Field(default=None)


class Analyze(AnalyzeBase, MinerRequestFields, table=True):
    """BizMiner analysis with inline text results."""

    __tablename__ = "analyzes"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    result_text: str | None = Field(default=None)
    summary: str | None = Field(default=None)
    improvement_leverages: str | None = Field(default=None)
    head_to_head: str | None = Field(default=None)
    sources: str | None = Field(default=None)


class SalesMinerAnalyze(AnalyzeBase, MinerRequestFields, table=True):
    """SalesMiner analysis whose result is a YAML file in object storage."""

    __tablename__ = "sales_miner_analyzes"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    result_text: str | None = Field(default=None)
    yaml_file: str | None = Field(default=None, max_length=500)  # storage key


class VitelisSalesAnalyze(AnalyzeBase, table=True):
    """VitelisSales deep-dive request tied to a report and company."""

    __tablename__ = "vitelis_sales_analyzes"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    url: str | None = Field(default=None, max_length=500)
    industry_id: int | None = Field(default=None)
    docx_file: str | None = Field(default=None, max_length=500)
    company_id: int | None = Field(default=None)
    report_id: int | None = Field(default=None)
    generated_report_id: str | None = Field(default=None, max_length=255)


AnalyzeRecord = Analyze | SalesMinerAnalyze | VitelisSalesAnalyze
