"""Payloads forwarded to n8n workflow webhooks.

n8n workflows read camelCase keys, so requests are dumped by alias.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _N8NPayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Competitor(_N8NPayload):
    name: str
    url: str


class MinerWorkflowRequest(_N8NPayload):
    company_name: str = Field(min_length=1)
    business_line: str
    country: str
    use_case: str
    timeline: str
    language: str | None = None
    additional_information: str | None = None
    url: str | None = None
    competitors: list[Competitor] | None = None


class VitelisSalesWorkflowRequest(_N8NPayload):
    company_name: str = Field(min_length=1)
    url: str
    use_case: str | None = None
    industry_id: int | None = None
    language: str | None = None
    additional_information: str | None = None


class WorkflowStarted(BaseModel):
    """Raw n8n response; ``execution_id`` is lifted from ``executionId`` when present."""

    execution_id: str | None
    data: dict[str, Any]


class ExecutionDetails(_N8NPayload):
    """Normalized n8n execution record."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True
    )

    id: str
    finished: bool = False
    mode: str = "manual"
    retry_of: str | None = None
    retry_success_id: str | None = None
    status: str | None = None
    created_at: str | None = None
    started_at: str | None = None
    stopped_at: str | None = None
    custom_data: dict[str, Any] = Field(default_factory=dict)
    data: Any = None
