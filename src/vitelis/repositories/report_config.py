"""Repositories for report settings, validator settings and data collection queries."""

from sqlmodel import col, select

from src.vitelis.models import (
    DataCollectionQuery,
    ReportDataCollectionQuery,
    ReportSettings,
    ValidatorSettings,
)
from src.vitelis.repositories.base import BaseRepository


class ReportSettingsRepository(BaseRepository[ReportSettings]):
    model = ReportSettings

    async def list_all(self) -> list[ReportSettings]:
        result = await self.session.execute(
            select(ReportSettings).order_by(col(ReportSettings.name), col(ReportSettings.id))
        )
        return list(result.scalars().all())


class ValidatorSettingsRepository(BaseRepository[ValidatorSettings]):
    model = ValidatorSettings

    async def list_all(self) -> list[ValidatorSettings]:
        result = await self.session.execute(
            select(ValidatorSettings).order_by(
                col(ValidatorSettings.name), col(ValidatorSettings.id)
            )
        )
        return list(result.scalars().all())


class DataCollectionQueryRepository(BaseRepository[DataCollectionQuery]):
    model = DataCollectionQuery

    async def list_for_report(self, report_id: int) -> list[DataCollectionQuery]:
        result = await self.session.execute(
            select(DataCollectionQuery)
            .join(
                ReportDataCollectionQuery,
                col(ReportDataCollectionQuery.data_collection_query_id)
                == col(DataCollectionQuery.id),
            )
            .where(ReportDataCollectionQuery.report_id == report_id)
            .order_by(col(DataCollectionQuery.id))
        )
        return list(result.scalars().all())

    async def get_for_report(self, report_id: int, query_id: int) -> DataCollectionQuery | None:
        """The query, only when it is linked to the report."""
        result = await self.session.execute(
            select(DataCollectionQuery)
            .join(
                ReportDataCollectionQuery,
                col(ReportDataCollectionQuery.data_collection_query_id)
                == col(DataCollectionQuery.id),
            )
            .where(
                ReportDataCollectionQuery.report_id == report_id,
                DataCollectionQuery.id == query_id,
            )
        )
        return result.scalar_one_or_none()
