"""Schemas for per-report settings selection and data collection queries."""

from typing import Any, Literal

from pydantic import BaseModel, Field, StrictInt

# --- Settings ---


class ReportSettingsRead(BaseModel):
    id: int
    name: str
    master_file_id: str
    prefix: int | None
    settings: dict[str, Any]

    model_config = {"from_attributes": True}


class ValidatorSettingsRead(BaseModel):
    id: int
    name: str
    settings: dict[str, Any]

    model_config = {"from_attributes": True}


class ReuseSettings(BaseModel):
    """Point the report at an existing settings row."""

    mode: Literal["reuse"]
    id: StrictInt


class CloneSettings(BaseModel):
    """Copy an existing row with new settings; the name defaults to a copy label."""

    mode: Literal["create"]
    strategy: Literal["clone"]
    base_id: StrictInt
    name: str | None = Field(default=None, min_length=1, max_length=200)
    settings: dict[str, Any]


class BlankReportSettings(BaseModel):
    mode: Literal["create"]
    strategy: Literal["blank"]
    name: str = Field(min_length=1, max_length=200)
    master_file_id: str = Field(min_length=1, max_length=255)
    prefix: StrictInt | None = None
    settings: dict[str, Any]


class BlankValidatorSettings(BaseModel):
    mode: Literal["create"]
    strategy: Literal["blank"]
    name: str = Field(min_length=1, max_length=200)
    settings: dict[str, Any]


# Variants are told apart by their mode and strategy literals
ReportSettingsAction = ReuseSettings | CloneSettings | BlankReportSettings
ValidatorSettingsAction = ReuseSettings | CloneSettings | BlankValidatorSettings


class ReportSettingsUpdate(BaseModel):
    report_settings_action: ReportSettingsAction | None = None
    validator_settings_action: ValidatorSettingsAction | None = None


class ReportRef(BaseModel):
    id: int
    name: str


class CurrentSettings(BaseModel):
    report_settings: ReportSettingsRead | None
    validator_settings: ValidatorSettingsRead | None


class SettingsOptions(BaseModel):
    report_settings: list[ReportSettingsRead]
    validator_settings: list[ValidatorSettingsRead]


class ReportSettingsOverview(BaseModel):
    """Settings the report uses now plus every row it could switch to."""

    report: ReportRef
    current: CurrentSettings
    options: SettingsOptions


# --- Queries ---


class DataCollectionQueryRead(BaseModel):
    id: int
    goal: str
    search_queries: list[str]


class ReportQueries(BaseModel):
    report_name: str
    queries: list[DataCollectionQueryRead]


class QueryUpdate(BaseModel):
    goal: str
    search_queries: list[str]
