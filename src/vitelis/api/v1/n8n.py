"""Workflow launch and execution lookup on n8n."""

from typing import Annotated, Any

from fastapi import APIRouter, Query

from src.vitelis.api.dependencies import CurrentUser, N8NServiceDep
from src.vitelis.models import AnalysisKind
from src.vitelis.schemas.n8n import (
    ExecutionDetails,
    MinerWorkflowRequest,
    VitelisSalesWorkflowRequest,
)

router = APIRouter(prefix="/n8n", tags=["n8n"])

_START_RESPONSES: dict[int | str, dict[str, Any]] = {
    200: {
        "description": "n8n accepted the run",
        "content": {"application/json": {"example": {"executionId": "12345"}}},
    },
    500: {"description": "n8n not configured, unreachable or returned an error"},
}


@router.post("/bizminer/start", responses=_START_RESPONSES)
async def start_bizminer(
    data: MinerWorkflowRequest, current_user: CurrentUser, service: N8NServiceDep
) -> dict[str, Any]:
    """Start a BizMiner workflow and return n8n's response."""
    return (await service.start_bizminer(data)).data


@router.post("/salesminer/start", responses=_START_RESPONSES)
async def start_salesminer(
    data: MinerWorkflowRequest, current_user: CurrentUser, service: N8NServiceDep
) -> dict[str, Any]:
    return (await service.start_salesminer(data)).data


@router.post("/vitelis-sales/start", responses=_START_RESPONSES)
async def start_vitelis_sales(
    data: VitelisSalesWorkflowRequest, current_user: CurrentUser, service: N8NServiceDep
) -> dict[str, Any]:
    return (await service.start_vitelis_sales(data)).data


@router.get("/execution/{execution_id}", response_model=ExecutionDetails)
async def get_execution(
    execution_id: str,
    current_user: CurrentUser,
    service: N8NServiceDep,
    type: Annotated[AnalysisKind | None, Query()] = None,
) -> ExecutionDetails:
    """Execution status and data; ``type`` selects the n8n instance."""
    return await service.get_execution(execution_id, type)
