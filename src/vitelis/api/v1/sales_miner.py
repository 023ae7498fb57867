"""SalesMiner analysis records."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.vitelis.api.dependencies import AdminUser, CurrentUser, SalesMinerServiceDep
from src.vitelis.schemas.analyze import (
    SalesMinerAnalyzeCreate,
    SalesMinerAnalyzeRead,
    SalesMinerAnalyzeUpdate,
)
from src.vitelis.schemas.pagination import PaginatedResponse

router = APIRouter(prefix="/sales-miner-analyze", tags=["sales-miner"])


@router.get("", response_model=PaginatedResponse[SalesMinerAnalyzeRead])
async def list_sales_miner_analyses(
    current_user: CurrentUser,
    service: SalesMinerServiceDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
    user_id: Annotated[UUID | None, Query(description="Admin only: filter by owner")] = None,
) -> PaginatedResponse[SalesMinerAnalyzeRead]:
    """List the caller's analyses; admins see every user's."""
    records, total = await service.list_for_user(current_user, page, limit, owner_id=user_id)
    return PaginatedResponse(
        items=[SalesMinerAnalyzeRead.model_validate(r) for r in records],
        total=total,
        page=page,
        limit=limit,
        has_more=page * limit < total,
    )


@router.get("/latest", response_model=SalesMinerAnalyzeRead | None)
async def get_latest_sales_miner_in_progress(
    current_user: CurrentUser, service: SalesMinerServiceDep
) -> SalesMinerAnalyzeRead | None:
    """Most recent analysis of the caller that is still running, if any."""
    record = await service.get_latest_in_progress(current_user)
    return SalesMinerAnalyzeRead.model_validate(record) if record else None


@router.get("/{analyze_id}", response_model=SalesMinerAnalyzeRead)
async def get_sales_miner_analysis(
    analyze_id: UUID, current_user: CurrentUser, service: SalesMinerServiceDep
) -> SalesMinerAnalyzeRead:
    record = await service.get_for_user(analyze_id, current_user)
    return SalesMinerAnalyzeRead.model_validate(record)


@router.post(
    "",
    response_model=SalesMinerAnalyzeRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_sales_miner_analysis(
    data: SalesMinerAnalyzeCreate,
    current_user: CurrentUser,
    service: SalesMinerServiceDep,
) -> SalesMinerAnalyzeRead:
    """Create an analysis; role=user accounts are charged one credit."""
    return SalesMinerAnalyzeRead.model_validate(await service.create(data, current_user))


@router.patch("/{analyze_id}", response_model=SalesMinerAnalyzeRead)
async def update_sales_miner_analysis(
    analyze_id: UUID,
    data: SalesMinerAnalyzeUpdate,
    current_user: CurrentUser,
    service: SalesMinerServiceDep,
) -> SalesMinerAnalyzeRead:
    record = await service.get_for_user(analyze_id, current_user)
    return SalesMinerAnalyzeRead.model_validate(await service.update(record, data))


@router.delete("/{analyze_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_sales_miner_analysis(
    analyze_id: UUID, admin: AdminUser, service: SalesMinerServiceDep
) -> None:
    record = await service.get_for_user(analyze_id, admin)
    await service.delete(record)
