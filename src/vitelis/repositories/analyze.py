"""Repositories for the analysis record families."""

from uuid import UUID

from sqlmodel import col, select

from src.vitelis.models import Analyze, SalesMinerAnalyze, VitelisSalesAnalyze
from src.vitelis.repositories.base import BaseRepository


class AnalyzeRecordRepository[RecordType: (Analyze, SalesMinerAnalyze, VitelisSalesAnalyze)](
    BaseRepository[RecordType]
):
    """Shared lookups for records correlated by ``execution_id``."""

    async def get_by_execution_id(self, execution_id: str) -> RecordType | None:
        """Get the record for a workflow execution (first match)."""
        result = await self.session.execute(
            select(self.model)
            .where(col(self.model.execution_id) == execution_id)
            .order_by(col(self.model.created_at).desc())
            .limit(1)
        )
        return result.scalars().first()

    async def list_for_user(
        self, user_id: UUID | None, page: int, limit: int
    ) -> tuple[list[RecordType], int]:
        """List records, newest first. ``user_id=None`` lists every user's records."""
        query = select(self.model)
        if user_id is not None:
            query = query.where(col(self.model.user_id) == user_id)
        return await self.paginate(query, page, limit, col(self.model.created_at).desc())


class AnalyzeRepository(AnalyzeRecordRepository[Analyze]):
    model = Analyze


class SalesMinerAnalyzeRepository(AnalyzeRecordRepository[SalesMinerAnalyze]):
    model = SalesMinerAnalyze


class VitelisSalesAnalyzeRepository(AnalyzeRecordRepository[VitelisSalesAnalyze]):
    model = VitelisSalesAnalyze

    async def list_by_report(self, report_id: int) -> list[VitelisSalesAnalyze]:
        result = await self.session.execute(
            select(VitelisSalesAnalyze)
            .where(VitelisSalesAnalyze.report_id == report_id)
            .order_by(col(VitelisSalesAnalyze.created_at).desc())
        )
        return list(result.scalars().all())
