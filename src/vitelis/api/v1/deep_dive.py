"""Deep-dive reports: settings, queries, step configuration, status matrix and orchestrator.

Every route here is admin-only.
"""

from typing import Annotated

from fastapi import APIRouter, Query, status

from src.vitelis.api.dependencies import (
    AdminUser,
    OrchestratorServiceDep,
    ReportConfigServiceDep,
    ReportServiceDep,
    ReportStepsServiceDep,
)
from src.vitelis.schemas.pagination import PaginatedResponse
from src.vitelis.schemas.report import ReportDetail, ReportRead
from src.vitelis.schemas.report_config import (
    DataCollectionQueryRead,
    QueryUpdate,
    ReportQueries,
    ReportSettingsOverview,
    ReportSettingsUpdate,
)
from src.vitelis.schemas.report_steps import (
    AddStepRequest,
    AddStepResponse,
    BulkStepStatusUpdate,
    CompanyStepStatusRead,
    EngineTickRequest,
    EngineTickResponse,
    GenerationStepRead,
    OperationResult,
    OrchestratorRead,
    OrchestratorStart,
    OrchestratorStartResponse,
    OrchestratorUpdate,
    ReportStepsRead,
    StepOrderUpdate,
    StepOverview,
    StepSettingsUpdate,
    StepsMatrix,
    StepsReorderRequest,
    StepStatusRead,
    StepStatusUpdate,
)
from src.vitelis.services.steps_matrix import (
    filter_matrix,
    parse_sort_key,
    parse_status_filter,
)

router = APIRouter(prefix="/deep-dive", tags=["deep-dive"])


# --- Reports ---


@router.get("", response_model=PaginatedResponse[ReportRead])
async def list_reports(
    admin: AdminUser,
    service: ReportServiceDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> PaginatedResponse[ReportRead]:
    reports, total = await service.list_reports(page, limit)
    return PaginatedResponse(
        items=[ReportRead.model_validate(r) for r in reports],
        total=total,
        page=page,
        limit=limit,
        has_more=page * limit < total,
    )


@router.get("/{report_id}", response_model=ReportDetail)
async def get_report(report_id: int, admin: AdminUser, service: ReportServiceDep) -> ReportDetail:
    return await service.get_report(report_id)


# --- Settings and data collection queries ---


@router.get("/{report_id}/settings", response_model=ReportSettingsOverview)
async def get_report_settings(
    report_id: int, admin: AdminUser, service: ReportConfigServiceDep
) -> ReportSettingsOverview:
    """Settings rows the report uses and every row it could switch to."""
    return await service.get_settings(report_id)


@router.patch(
    "/{report_id}/settings",
    response_model=ReportSettingsOverview,
    responses={404: {"description": "Report or base settings not found"}},
)
async def update_report_settings(
    report_id: int,
    data: ReportSettingsUpdate,
    admin: AdminUser,
    service: ReportConfigServiceDep,
) -> ReportSettingsOverview:
    """Point the report at existing settings rows or at newly created copies."""
    return await service.update_settings(
        report_id, data.report_settings_action, data.validator_settings_action
    )


@router.get("/{report_id}/queries", response_model=ReportQueries)
async def get_report_queries(
    report_id: int, admin: AdminUser, service: ReportConfigServiceDep
) -> ReportQueries:
    return await service.list_queries(report_id)


@router.put(
    "/{report_id}/queries/{query_id}",
    response_model=DataCollectionQueryRead,
    responses={
        400: {"description": "Goal is empty"},
        404: {"description": "Query not linked to the report"},
    },
)
async def update_report_query(
    report_id: int,
    query_id: int,
    data: QueryUpdate,
    admin: AdminUser,
    service: ReportConfigServiceDep,
) -> DataCollectionQueryRead:
    return await service.update_query(report_id, query_id, data.goal, data.search_queries)


# --- Step configuration ---


@router.get("/{report_id}/steps", response_model=ReportStepsRead)
async def get_report_steps(
    report_id: int, admin: AdminUser, service: ReportStepsServiceDep
) -> ReportStepsRead:
    """Configured steps in execution order plus the catalog steps still available."""
    return await service.get_report_steps(report_id)


@router.post(
    "/{report_id}/steps",
    response_model=AddStepResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"description": "Report or step not found"},
        409: {"description": "Step already exists in report"},
    },
)
async def add_step(
    report_id: int, data: AddStepRequest, admin: AdminUser, service: ReportStepsServiceDep
) -> AddStepResponse:
    return await service.add_step_to_report(report_id, data.step_id)


@router.put("/{report_id}/steps/order", response_model=OperationResult)
async def reorder_steps(
    report_id: int,
    data: StepsReorderRequest,
    admin: AdminUser,
    service: ReportStepsServiceDep,
) -> OperationResult:
    """Renumber the given steps 1..n in list order."""
    await service.reorder_steps(report_id, data.ordered_step_ids)
    return OperationResult(updated=len(data.ordered_step_ids))


@router.delete("/{report_id}/steps/{step_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_step(
    report_id: int, step_id: int, admin: AdminUser, service: ReportStepsServiceDep
) -> None:
    await service.remove_step_from_report(report_id, step_id)


@router.patch("/{report_id}/steps/{step_id}/order", response_model=OperationResult)
async def update_step_order(
    report_id: int,
    step_id: int,
    data: StepOrderUpdate,
    admin: AdminUser,
    service: ReportStepsServiceDep,
) -> OperationResult:
    await service.update_step_order(report_id, step_id, data.order)
    return OperationResult()


@router.patch("/{report_id}/steps/{step_id}/settings", response_model=GenerationStepRead)
async def update_step_settings(
    report_id: int,
    step_id: int,
    data: StepSettingsUpdate,
    admin: AdminUser,
    service: ReportStepsServiceDep,
) -> GenerationStepRead:
    """Replace the settings of a step configured on this report."""
    return await service.update_generation_step_settings(step_id, data.settings, report_id)


# --- Status matrix ---


@router.get("/{report_id}/steps-matrix", response_model=StepsMatrix)
async def get_steps_matrix(
    report_id: int,
    admin: AdminUser,
    service: ReportStepsServiceDep,
    search: Annotated[str | None, Query(description="Company name or id substring")] = None,
    status_filter: Annotated[list[str] | None, Query(alias="status")] = None,
    step_ids: Annotated[list[int] | None, Query(description="Visible step columns")] = None,
    sort_by: Annotated[str, Query(description="name, id or a step id")] = "name",
    descending: bool = False,
) -> StepsMatrix:
    """Company x step status board; cells never written read PENDING."""
    matrix = await service.get_steps_matrix(report_id)
    return filter_matrix(
        matrix,
        search=search,
        statuses=parse_status_filter(status_filter),
        visible_step_ids=step_ids,
        sort_by=parse_sort_key(sort_by),
        descending=descending,
    )


@router.patch("/{report_id}/status", response_model=StepStatusRead)
async def update_step_status(
    report_id: int, data: StepStatusUpdate, admin: AdminUser, service: ReportStepsServiceDep
) -> StepStatusRead:
    """Set one cell. Any status may replace any other."""
    return await service.update_step_status(
        report_id, data.company_id, data.step_id, data.status, data.metadata
    )


@router.get(
    "/{report_id}/companies/{company_id}/steps", response_model=list[CompanyStepStatusRead]
)
async def get_company_step_statuses(
    report_id: int, company_id: int, admin: AdminUser, service: ReportStepsServiceDep
) -> list[CompanyStepStatusRead]:
    return await service.get_company_step_statuses(report_id, company_id)


@router.put("/{report_id}/companies/{company_id}/steps", response_model=OperationResult)
async def bulk_update_step_statuses(
    report_id: int,
    company_id: int,
    data: BulkStepStatusUpdate,
    admin: AdminUser,
    service: ReportStepsServiceDep,
) -> OperationResult:
    updated = await service.bulk_update_step_statuses(report_id, company_id, data.updates)
    return OperationResult(updated=updated)


@router.get("/{report_id}/overview", response_model=list[StepOverview])
async def get_steps_overview(
    report_id: int, admin: AdminUser, service: ReportStepsServiceDep
) -> list[StepOverview]:
    return await service.get_steps_overview(report_id)


# --- Orchestrator ---


@router.get("/{report_id}/orchestrator", response_model=OrchestratorRead)
async def get_orchestrator(
    report_id: int, admin: AdminUser, service: OrchestratorServiceDep
) -> OrchestratorRead:
    return await service.get_orchestrator_status(report_id)


@router.patch(
    "/{report_id}/orchestrator",
    response_model=OrchestratorRead,
    responses={
        400: {"description": "Neither status nor metadata given"},
        404: {"description": "Metadata patch without an orchestrator record"},
    },
)
async def update_orchestrator(
    report_id: int, data: OrchestratorUpdate, admin: AdminUser, service: OrchestratorServiceDep
) -> OrchestratorRead:
    """Overwrite status and/or patch metadata (null values delete keys)."""
    return await service.update_orchestrator(report_id, data.status, data.metadata)


@router.post("/{report_id}/orchestrator", response_model=OrchestratorStartResponse)
async def start_orchestrator(
    report_id: int,
    admin: AdminUser,
    service: OrchestratorServiceDep,
    data: OrchestratorStart | None = None,
) -> OrchestratorStartResponse:
    parallel_limit = data.parallel_limit if data else 1
    return await service.start_orchestrator(report_id, parallel_limit)


@router.post(
    "/{report_id}/orchestrator/trigger",
    response_model=EngineTickResponse,
    responses={
        409: {"description": "Orchestrator is not PROCESSING"},
        500: {"description": "Engine notification could not be dispatched"},
    },
)
async def trigger_engine_tick(
    report_id: int,
    admin: AdminUser,
    service: OrchestratorServiceDep,
    data: EngineTickRequest | None = None,
) -> EngineTickResponse:
    """Wake one engine instance. Step results arrive later through status updates."""
    instance = data.instance if data else 1
    return await service.trigger_engine_tick(report_id, instance)
