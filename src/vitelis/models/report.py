"""Deep-dive report models: reports, their companies, industries and configuration."""

from datetime import datetime
from typing import Any

from sqlalchemy import Column, UniqueConstraint
from sqlmodel import Field, SQLModel

from src.vitelis.models.base import JSONType, utc_now


class Industry(SQLModel, table=True):
    __tablename__ = "industries"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=200, unique=True)


class Company(SQLModel, table=True):
    __tablename__ = "companies"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=200, index=True)
    url: str | None = Field(default=None, max_length=500)
    industry_id: int | None = Field(default=None, foreign_key="industries.id")


class ReportSettings(SQLModel, table=True):
    """Reusable generation settings; several reports may point at one row."""

    __tablename__ = "report_settings"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=200)
    master_file_id: str = Field(max_length=255)
    prefix: int | None = Field(default=None)
    settings: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSONType, nullable=False),
    )


class ValidatorSettings(SQLModel, table=True):
    """Reusable source validation settings."""

    __tablename__ = "source_validation_settings"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=200)
    settings: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSONType, nullable=False),
    )


class Report(SQLModel, table=True):
    """A deep dive spanning several companies and configured generation steps."""

    __tablename__ = "reports"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=200)
    description: str | None = Field(default=None)
    use_case: str | None = Field(default=None, max_length=200)
    report_settings_id: int | None = Field(default=None, foreign_key="report_settings.id")
    source_validation_settings_id: int | None = Field(
        default=None, foreign_key="source_validation_settings.id"
    )
    created_at: datetime = Field(default_factory=utc_now)


class ReportCompany(SQLModel, table=True):
    """Association of a company with a report."""

    __tablename__ = "report_companies"
    __table_args__ = (
        UniqueConstraint("report_id", "company_id", name="uq_report_companies_report_company"),
    )

    id: int | None = Field(default=None, primary_key=True)
    report_id: int = Field(foreign_key="reports.id", index=True)
    company_id: int = Field(foreign_key="companies.id")


class DataCollectionQuery(SQLModel, table=True):
    """A research goal and the search queries used to collect sources for it.

    ``query`` holds ``{"goal": str, "search_queries": [str, ...]}``.
    """

    __tablename__ = "data_collection_queries"

    id: int | None = Field(default=None, primary_key=True)
    query: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSONType, nullable=False),
    )


class ReportDataCollectionQuery(SQLModel, table=True):
    """Association of a data collection query with a report."""

    __tablename__ = "report_data_collection_queries"
    __table_args__ = (
        UniqueConstraint(
            "report_id", "data_collection_query_id", name="uq_report_queries_report_query"
        ),
    )

    id: int | None = Field(default=None, primary_key=True)
    report_id: int = Field(foreign_key="reports.id", index=True)
    data_collection_query_id: int = Field(foreign_key="data_collection_queries.id")
