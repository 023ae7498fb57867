from fastapi import APIRouter

from src.vitelis.api.dependencies import CurrentUser, ReportServiceDep
from src.vitelis.schemas.report import IndustryRead

router = APIRouter(prefix="/industries", tags=["industries"])


@router.get("", response_model=list[IndustryRead])
async def list_industries(
    current_user: CurrentUser, service: ReportServiceDep
) -> list[IndustryRead]:
    return [IndustryRead.model_validate(i) for i in await service.list_industries()]
