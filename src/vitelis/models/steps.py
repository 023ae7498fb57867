"""Generation step catalog, per-report configuration and the status matrix."""

from datetime import datetime
from typing import Any

from sqlalchemy import Column, UniqueConstraint
from sqlmodel import Field, SQLModel

from src.vitelis.models.base import JSONType, utc_now
from src.vitelis.models.enums import StepStatus


class GenerationStep(SQLModel, table=True):
    """Catalog entry for one unit of external report-generation work."""

    __tablename__ = "report_generation_steps"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=200, unique=True)
    url: str = Field(max_length=500)
    dependency: str | None = Field(default=None, max_length=200)  # name of prerequisite step
    settings: dict[str, str] | None = Field(
        default=None,
        sa_column=Column(JSONType, nullable=True),
    )


class ReportStep(SQLModel, table=True):
    """A catalog step attached to a report.

    ``step_order`` is 1-based. Removal does not renumber the remaining steps
    and single-step reorders may produce ties.
    """

    __tablename__ = "report_steps"
    __table_args__ = (UniqueConstraint("report_id", "step_id", name="uq_report_steps_report_step"),)

    id: int | None = Field(default=None, primary_key=True)
    report_id: int = Field(foreign_key="reports.id", index=True)
    step_id: int = Field(foreign_key="report_generation_steps.id")
    step_order: int = Field(default=1)


class ReportStepStatus(SQLModel, table=True):
    """Explicit status cell for one (company, step) pair of a report."""

    __tablename__ = "report_step_statuses"
    __table_args__ = (
        UniqueConstraint(
            "report_id", "company_id", "step_id", name="uq_report_step_statuses_cell"
        ),
    )

    id: int | None = Field(default=None, primary_key=True)
    report_id: int = Field(foreign_key="reports.id", index=True)
    company_id: int = Field(foreign_key="companies.id")
    step_id: int = Field(foreign_key="report_generation_steps.id")
    status: str = Field(default=StepStatus.PENDING.value, max_length=20)
    meta: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column("metadata", JSONType, nullable=True),
    )
    updated_at: datetime = Field(default_factory=utc_now)


class ReportOrchestrator(SQLModel, table=True):
    """Report-level control record: run status plus engine settings metadata."""

    __tablename__ = "report_orchestrator"

    id: int | None = Field(default=None, primary_key=True)
    report_id: int = Field(foreign_key="reports.id", unique=True)
    status: str = Field(default=StepStatus.PENDING.value, max_length=20)
    meta: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column("metadata", JSONType, nullable=True),
    )
    updated_at: datetime = Field(default_factory=utc_now)
