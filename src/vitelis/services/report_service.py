"""Read access to deep-dive reports and industries."""

from src.vitelis.core.exceptions import NotFoundError
from src.vitelis.models import Industry, Report
from src.vitelis.repositories import IndustryRepository, ReportRepository
from src.vitelis.schemas.report import CompanyRead, ReportDetail, ReportRead


class ReportService:
    def __init__(self, report_repo: ReportRepository, industry_repo: IndustryRepository):
        self.report_repo = report_repo
        self.industry_repo = industry_repo

    async def list_reports(self, page: int, limit: int) -> tuple[list[Report], int]:
        return await self.report_repo.list_reports(page, limit)

    async def get_report(self, report_id: int) -> ReportDetail:
        report = await self.report_repo.get_by_id(report_id)
        if report is None:
            raise NotFoundError(f"Report {report_id} not found")
        companies = await self.report_repo.list_companies(report_id)
        return ReportDetail(
            **ReportRead.model_validate(report).model_dump(),
            companies=[CompanyRead.model_validate(c) for c in companies],
        )

    async def list_industries(self) -> list[Industry]:
        return await self.industry_repo.list_all()
