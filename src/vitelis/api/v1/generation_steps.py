"""Catalog of report generation steps."""

from fastapi import APIRouter, status

from src.vitelis.api.dependencies import AdminUser, ReportStepsServiceDep
from src.vitelis.schemas.report_steps import (
    GenerationStepCreate,
    GenerationStepRead,
    StepSettingsUpdate,
)

router = APIRouter(prefix="/generation-steps", tags=["deep-dive"])


@router.get("", response_model=list[GenerationStepRead])
async def list_generation_steps(
    admin: AdminUser, service: ReportStepsServiceDep
) -> list[GenerationStepRead]:
    return await service.list_generation_steps()


@router.post(
    "",
    response_model=GenerationStepRead,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "A step with this name already exists"}},
)
async def create_generation_step(
    data: GenerationStepCreate, admin: AdminUser, service: ReportStepsServiceDep
) -> GenerationStepRead:
    return await service.create_generation_step(data)


@router.patch("/{step_id}", response_model=GenerationStepRead)
async def update_generation_step_settings(
    step_id: int, data: StepSettingsUpdate, admin: AdminUser, service: ReportStepsServiceDep
) -> GenerationStepRead:
    """Replace the step's settings map. Every report using the step sees the change."""
    return await service.update_generation_step_settings(step_id, data.settings)
