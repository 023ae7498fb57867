"""Webhook callback payloads sent by the n8n workflow engine.

The engine posts camelCase keys; snake_case names are accepted as well.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt
from pydantic.alias_generators import to_camel


class _CallbackPayload(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    execution_id: str = Field(min_length=1)


class ProgressCallback(_CallbackPayload):
    # Range is checked by the service so the error text stays stable
    step: StrictInt | StrictFloat


class ResultCallback(_CallbackPayload):
    # Must be present, may be null
    data: str | None
    summary: str | None = None
    improvement_leverages: str | None = None
    head_to_head: str | None = None
    sources: str | None = None


class VitelisSalesResultCallback(_CallbackPayload):
    generated_report_id: str | None = None


class WebhookResponse(BaseModel):
    """Outcome of a callback. Failures still travel with HTTP 200."""

    success: bool
    message: str | None = None
    error: str | None = None
    data: dict[str, Any] | None = None
