"""Repositories for deep-dive reports, companies and industries."""

from sqlmodel import col, select

from src.vitelis.models import Company, Industry, Report, ReportCompany
from src.vitelis.repositories.base import BaseRepository


class ReportRepository(BaseRepository[Report]):
    model = Report

    async def list_reports(self, page: int, limit: int) -> tuple[list[Report], int]:
        return await self.paginate(select(Report), page, limit, col(Report.created_at).desc())

    async def list_companies(self, report_id: int) -> list[Company]:
        """Companies attached to a report, ordered by name."""
        result = await self.session.execute(
            select(Company)
            .join(ReportCompany, col(ReportCompany.company_id) == col(Company.id))
            .where(ReportCompany.report_id == report_id)
            .order_by(col(Company.name), col(Company.id))
        )
        return list(result.scalars().all())

    async def has_company(self, report_id: int, company_id: int) -> bool:
        result = await self.session.execute(
            select(ReportCompany.id).where(
                ReportCompany.report_id == report_id,
                ReportCompany.company_id == company_id,
            )
        )
        return result.first() is not None


class IndustryRepository(BaseRepository[Industry]):
    model = Industry

    async def list_all(self) -> list[Industry]:
        result = await self.session.execute(select(Industry).order_by(col(Industry.name)))
        return list(result.scalars().all())
