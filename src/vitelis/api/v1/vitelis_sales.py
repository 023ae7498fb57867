"""VitelisSales analysis records."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.vitelis.api.dependencies import AdminUser, CurrentUser, VitelisSalesServiceDep
from src.vitelis.schemas.analyze import (
    VitelisSalesAnalyzeCreate,
    VitelisSalesAnalyzeRead,
    VitelisSalesAnalyzeUpdate,
)
from src.vitelis.schemas.pagination import PaginatedResponse

router = APIRouter(prefix="/vitelis-sales-analyze", tags=["vitelis-sales"])


@router.get("", response_model=PaginatedResponse[VitelisSalesAnalyzeRead])
async def list_vitelis_sales_analyses(
    current_user: CurrentUser,
    service: VitelisSalesServiceDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
    user_id: Annotated[UUID | None, Query(description="Admin only: filter by owner")] = None,
) -> PaginatedResponse[VitelisSalesAnalyzeRead]:
    """List the caller's analyses; admins see every user's."""
    records, total = await service.list_for_user(current_user, page, limit, owner_id=user_id)
    return PaginatedResponse(
        items=[VitelisSalesAnalyzeRead.model_validate(r) for r in records],
        total=total,
        page=page,
        limit=limit,
        has_more=page * limit < total,
    )


@router.get("/latest", response_model=VitelisSalesAnalyzeRead | None)
async def get_latest_vitelis_sales_in_progress(
    current_user: CurrentUser, service: VitelisSalesServiceDep
) -> VitelisSalesAnalyzeRead | None:
    """Most recent analysis of the caller that is still running, if any."""
    record = await service.get_latest_in_progress(current_user)
    return VitelisSalesAnalyzeRead.model_validate(record) if record else None


@router.get("/{analyze_id}", response_model=VitelisSalesAnalyzeRead)
async def get_vitelis_sales_analysis(
    analyze_id: UUID, current_user: CurrentUser, service: VitelisSalesServiceDep
) -> VitelisSalesAnalyzeRead:
    record = await service.get_for_user(analyze_id, current_user)
    return VitelisSalesAnalyzeRead.model_validate(record)


@router.post(
    "",
    response_model=VitelisSalesAnalyzeRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_vitelis_sales_analysis(
    data: VitelisSalesAnalyzeCreate,
    current_user: CurrentUser,
    service: VitelisSalesServiceDep,
) -> VitelisSalesAnalyzeRead:
    """Create an analysis. VitelisSales runs are not metered."""
    return VitelisSalesAnalyzeRead.model_validate(await service.create(data, current_user))


@router.patch("/{analyze_id}", response_model=VitelisSalesAnalyzeRead)
async def update_vitelis_sales_analysis(
    analyze_id: UUID,
    data: VitelisSalesAnalyzeUpdate,
    current_user: CurrentUser,
    service: VitelisSalesServiceDep,
) -> VitelisSalesAnalyzeRead:
    record = await service.get_for_user(analyze_id, current_user)
    return VitelisSalesAnalyzeRead.model_validate(await service.update(record, data))


@router.delete("/{analyze_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vitelis_sales_analysis(
    analyze_id: UUID, admin: AdminUser, service: VitelisSalesServiceDep
) -> None:
    record = await service.get_for_user(analyze_id, admin)
    await service.delete(record)
