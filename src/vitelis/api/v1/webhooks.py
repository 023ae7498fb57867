"""Callbacks from the n8n workflow engine.

The engine ignores HTTP status codes, so failures are reported in the body
with ``success: false`` and, apart from rejected uploads, HTTP 200.
"""

import json
from collections.abc import Awaitable, Callable
from typing import Annotated, Any, TypeVar

import pydantic
from fastapi import APIRouter, Header, Request, Response, status
from starlette.datastructures import UploadFile

from src.vitelis.api.dependencies import WebhookServiceDep
from src.vitelis.core.config import get_settings
from src.vitelis.core.exceptions import AppError, AuthenticationError, ValidationError
from src.vitelis.core.logging import get_logger
from src.vitelis.core.security import secrets_match
from src.vitelis.models import AnalysisKind
from src.vitelis.schemas.webhook import (
    ProgressCallback,
    ResultCallback,
    VitelisSalesResultCallback,
    WebhookResponse,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/webhook", tags=["webhooks"])

PayloadT = TypeVar("PayloadT", bound=pydantic.BaseModel)
WebhookSecret = Annotated[str | None, Header(alias="X-Webhook-Secret")]


def _check_secret(provided: str | None) -> None:
    expected = get_settings().webhook_secret
    if expected and not secrets_match(provided, expected):
        raise AuthenticationError("Invalid webhook secret")


async def _parse(request: Request, model: type[PayloadT]) -> PayloadT:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError("Request body must be valid JSON") from e
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")

    try:
        return model.model_validate(body)
    except pydantic.ValidationError as e:
        errors = e.errors()
        missing = [str(err["loc"][0]) for err in errors if err["type"] == "missing"]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}") from e
        if any(err["loc"][0] == "step" for err in errors):
            raise ValidationError("Step must be a non-negative number") from e
        raise ValidationError(e.errors()[0]["msg"]) from e


async def _respond(
    action: str, handler: Callable[[], Awaitable[WebhookResponse]]
) -> WebhookResponse:
    """Run a callback handler, turning every failure into ``success: false``."""
    try:
        return await handler()
    except AppError as e:
        logger.warning("webhook_rejected", action=action, error=e.message)
        return WebhookResponse(success=False, error=e.message)
    except Exception:
        logger.exception("webhook_failed", action=action)
        return WebhookResponse(success=False, error="Internal server error")


def _progress_data(record: Any) -> dict[str, Any]:
    return {
        "executionId": record.execution_id,
        "executionStep": record.execution_step,
        "executionStatus": record.execution_status,
    }


def _result_data(record: Any, **extra: Any) -> dict[str, Any]:
    return {
        "executionId": record.execution_id,
        "executionStatus": record.execution_status,
        "status": record.status,
        **extra,
    }


async def _progress(
    kind: AnalysisKind, request: Request, service: WebhookServiceDep, secret: str | None
) -> WebhookResponse:
    async def handle() -> WebhookResponse:
        _check_secret(secret)
        payload = await _parse(request, ProgressCallback)
        record = await service.update_progress(kind, payload.execution_id, payload.step)
        return WebhookResponse(
            success=True, message="Progress updated successfully", data=_progress_data(record)
        )

    return await _respond(f"{kind.value}_progress", handle)


@router.post("/progress", response_model=WebhookResponse)
async def bizminer_progress(
    request: Request, service: WebhookServiceDep, secret: WebhookSecret = None
) -> WebhookResponse:
    """Record the current step of a BizMiner execution."""
    return await _progress(AnalysisKind.BIZMINER, request, service, secret)


@router.post("/result", response_model=WebhookResponse)
async def bizminer_result(
    request: Request, service: WebhookServiceDep, secret: WebhookSecret = None
) -> WebhookResponse:
    """Store BizMiner result text and mark the analysis finished."""

    async def handle() -> WebhookResponse:
        _check_secret(secret)
        payload = await _parse(request, ResultCallback)
        record = await service.update_result(
            payload.execution_id,
            payload.data,
            summary=payload.summary,
            improvement_leverages=payload.improvement_leverages,
            head_to_head=payload.head_to_head,
            sources=payload.sources,
        )
        return WebhookResponse(
            success=True,
            message="Result updated successfully",
            data=_result_data(record, resultText=record.result_text),
        )

    return await _respond("bizminer_result", handle)


@router.post("/salesminer/progress", response_model=WebhookResponse)
async def salesminer_progress(
    request: Request, service: WebhookServiceDep, secret: WebhookSecret = None
) -> WebhookResponse:
    return await _progress(AnalysisKind.SALESMINER, request, service, secret)


@router.post("/salesminer/result", response_model=WebhookResponse)
async def salesminer_result(
    request: Request, service: WebhookServiceDep, secret: WebhookSecret = None
) -> WebhookResponse:
    """Store inline SalesMiner result text."""

    async def handle() -> WebhookResponse:
        _check_secret(secret)
        payload = await _parse(request, ResultCallback)
        record = await service.update_sales_miner_result(payload.execution_id, payload.data)
        return WebhookResponse(
            success=True,
            message="Result updated successfully",
            data=_result_data(record, resultText=record.result_text),
        )

    return await _respond("salesminer_result", handle)


@router.post(
    "/salesminer/result/{execution_id}",
    response_model=WebhookResponse,
    responses={400: {"description": "Missing, non-YAML or malformed YAML file"}},
)
async def salesminer_yaml_result(
    execution_id: str,
    request: Request,
    response: Response,
    service: WebhookServiceDep,
    secret: WebhookSecret = None,
) -> WebhookResponse:
    """Accept a multipart ``file`` with the YAML result, store it, finish the analysis.

    File problems answer 400; other failures follow the usual 200 convention.
    """
    try:
        _check_secret(secret)
        form = await request.form()
        upload = form.get("file")
        if not isinstance(upload, UploadFile):
            raise ValidationError("No YAML file provided")
        content = await upload.read()
        if not content:
            raise ValidationError("No YAML file provided")

        record = await service.update_yaml_result(
            execution_id, upload.filename, upload.content_type, content
        )
    except ValidationError as e:
        logger.warning("webhook_rejected", action="salesminer_yaml_result", error=e.message)
        response.status_code = status.HTTP_400_BAD_REQUEST
        return WebhookResponse(success=False, error=e.message)
    except AppError as e:
        logger.warning("webhook_rejected", action="salesminer_yaml_result", error=e.message)
        return WebhookResponse(success=False, error=e.message)
    except Exception:
        logger.exception("webhook_failed", action="salesminer_yaml_result")
        return WebhookResponse(success=False, error="Internal server error")

    return WebhookResponse(
        success=True,
        message="YAML file uploaded and analysis marked as finished",
        data=_result_data(record, yamlFile=record.yaml_file),
    )


@router.post("/vitelis-sales/progress", response_model=WebhookResponse)
async def vitelis_sales_progress(
    request: Request, service: WebhookServiceDep, secret: WebhookSecret = None
) -> WebhookResponse:
    return await _progress(AnalysisKind.VITELIS_SALES, request, service, secret)


@router.post("/vitelis-sales/result", response_model=WebhookResponse)
async def vitelis_sales_result(
    request: Request, service: WebhookServiceDep, secret: WebhookSecret = None
) -> WebhookResponse:
    """Finish a VitelisSales run, keeping the id of the generated report."""

    async def handle() -> WebhookResponse:
        _check_secret(secret)
        payload = await _parse(request, VitelisSalesResultCallback)
        record = await service.update_vitelis_sales_result(
            payload.execution_id, payload.generated_report_id
        )
        return WebhookResponse(
            success=True,
            message="VitelisSales result updated successfully",
            data=_result_data(record, generatedReportId=record.generated_report_id),
        )

    return await _respond("vitelis_sales_result", handle)
