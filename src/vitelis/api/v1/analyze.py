"""BizMiner analysis records."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.vitelis.api.dependencies import AdminUser, AnalyzeServiceDep, CurrentUser
from src.vitelis.schemas.analyze import AnalyzeCreate, AnalyzeRead, AnalyzeUpdate
from src.vitelis.schemas.pagination import PaginatedResponse

router = APIRouter(prefix="/analyze", tags=["analyze"])


@router.get("", response_model=PaginatedResponse[AnalyzeRead])
async def list_analyses(
    current_user: CurrentUser,
    service: AnalyzeServiceDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
    user_id: Annotated[UUID | None, Query(description="Admin only: filter by owner")] = None,
) -> PaginatedResponse[AnalyzeRead]:
    """List the caller's analyses; admins see every user's."""
    records, total = await service.list_for_user(current_user, page, limit, owner_id=user_id)
    return PaginatedResponse(
        items=[AnalyzeRead.model_validate(r) for r in records],
        total=total,
        page=page,
        limit=limit,
        has_more=page * limit < total,
    )


@router.get("/latest", response_model=AnalyzeRead | None)
async def get_latest_in_progress(
    current_user: CurrentUser, service: AnalyzeServiceDep
) -> AnalyzeRead | None:
    """Most recent analysis of the caller that is still running, if any."""
    record = await service.get_latest_in_progress(current_user)
    return AnalyzeRead.model_validate(record) if record else None


@router.get("/{analyze_id}", response_model=AnalyzeRead)
async def get_analysis(
    analyze_id: UUID, current_user: CurrentUser, service: AnalyzeServiceDep
) -> AnalyzeRead:
    return AnalyzeRead.model_validate(await service.get_for_user(analyze_id, current_user))


@router.post(
    "",
    response_model=AnalyzeRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_analysis(
    data: AnalyzeCreate, current_user: CurrentUser, service: AnalyzeServiceDep
) -> AnalyzeRead:
    """Create an analysis; role=user accounts are charged one credit."""
    return AnalyzeRead.model_validate(await service.create(data, current_user))


@router.patch("/{analyze_id}", response_model=AnalyzeRead)
async def update_analysis(
    analyze_id: UUID,
    data: AnalyzeUpdate,
    current_user: CurrentUser,
    service: AnalyzeServiceDep,
) -> AnalyzeRead:
    record = await service.get_for_user(analyze_id, current_user)
    return AnalyzeRead.model_validate(await service.update(record, data))


@router.delete("/{analyze_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_analysis(analyze_id: UUID, admin: AdminUser, service: AnalyzeServiceDep) -> None:
    record = await service.get_for_user(analyze_id, admin)
    await service.delete(record)
