"""Per-report settings selection and data collection query editing."""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.vitelis.core.exceptions import NotFoundError, ValidationError
from src.vitelis.core.logging import get_logger
from src.vitelis.models import DataCollectionQuery, Report, ReportSettings, ValidatorSettings
from src.vitelis.repositories import (
    DataCollectionQueryRepository,
    ReportRepository,
    ReportSettingsRepository,
    ValidatorSettingsRepository,
)
from src.vitelis.schemas.report_config import (
    CloneSettings,
    CurrentSettings,
    DataCollectionQueryRead,
    ReportQueries,
    ReportRef,
    ReportSettingsAction,
    ReportSettingsOverview,
    ReportSettingsRead,
    ReuseSettings,
    SettingsOptions,
    ValidatorSettingsAction,
    ValidatorSettingsRead,
)

logger = get_logger(__name__)


def copy_name(base_name: str, report_id: int) -> str:
    """Default name of a settings row cloned for a report."""
    return f"{base_name} (Report #{report_id} copy)"


def query_read(query: DataCollectionQuery) -> DataCollectionQueryRead:
    content = query.query or {}
    search_queries = content.get("search_queries")
    return DataCollectionQueryRead(
        id=query.id,
        goal=content.get("goal") or "",
        search_queries=search_queries if isinstance(search_queries, list) else [],
    )


class ReportConfigService:
    def __init__(
        self,
        report_repo: ReportRepository,
        report_settings_repo: ReportSettingsRepository,
        validator_settings_repo: ValidatorSettingsRepository,
        query_repo: DataCollectionQueryRepository,
        session: AsyncSession,
    ):
        self.report_repo = report_repo
        self.report_settings_repo = report_settings_repo
        self.validator_settings_repo = validator_settings_repo
        self.query_repo = query_repo
        self.session = session

    async def _get_report(self, report_id: int) -> Report:
        report = await self.report_repo.get_by_id(report_id)
        if report is None:
            raise NotFoundError(f"Report {report_id} not found")
        return report

    # --- Settings ---

    async def get_settings(self, report_id: int) -> ReportSettingsOverview:
        report = await self._get_report(report_id)
        return await self._overview(report)

    async def _overview(self, report: Report) -> ReportSettingsOverview:
        report_settings: ReportSettings | None = None
        validator_settings: ValidatorSettings | None = None
        if report.report_settings_id is not None:
            report_settings = await self.report_settings_repo.get_by_id(report.report_settings_id)
        if report.source_validation_settings_id is not None:
            validator_settings = await self.validator_settings_repo.get_by_id(
                report.source_validation_settings_id
            )

        return ReportSettingsOverview(
            report=ReportRef(id=report.id, name=report.name),
            current=CurrentSettings(
                report_settings=(
                    ReportSettingsRead.model_validate(report_settings) if report_settings else None
                ),
                validator_settings=(
                    ValidatorSettingsRead.model_validate(validator_settings)
                    if validator_settings
                    else None
                ),
            ),
            options=SettingsOptions(
                report_settings=[
                    ReportSettingsRead.model_validate(s)
                    for s in await self.report_settings_repo.list_all()
                ],
                validator_settings=[
                    ValidatorSettingsRead.model_validate(s)
                    for s in await self.validator_settings_repo.list_all()
                ],
            ),
        )

    async def update_settings(
        self,
        report_id: int,
        report_action: ReportSettingsAction | None = None,
        validator_action: ValidatorSettingsAction | None = None,
    ) -> ReportSettingsOverview:
        """Point the report at existing or newly created settings rows.

        Every referenced row is resolved before anything is written, so a
        missing base leaves the report unchanged.
        """
        if report_action is None and validator_action is None:
            raise ValidationError(
                "Either report_settings_action or validator_settings_action must be provided"
            )
        report = await self._get_report(report_id)

        report_settings = (
            await self._resolve_report_settings(report_id, report_action)
            if report_action is not None
            else None
        )
        validator_settings = (
            await self._resolve_validator_settings(report_id, validator_action)
            if validator_action is not None
            else None
        )

        try:
            # Ids of newly created rows are assigned on flush
            await self.session.flush()
            if report_settings is not None:
                report.report_settings_id = report_settings.id
            if validator_settings is not None:
                report.source_validation_settings_id = validator_settings.id
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        await self.session.refresh(report)

        logger.info(
            "report_settings_updated",
            report_id=report_id,
            report_settings_id=report.report_settings_id,
            validator_settings_id=report.source_validation_settings_id,
        )
        return await self._overview(report)

    async def _resolve_report_settings(
        self, report_id: int, action: ReportSettingsAction
    ) -> ReportSettings:
        if isinstance(action, ReuseSettings):
            return await self._get_report_settings(action.id)

        if isinstance(action, CloneSettings):
            base = await self._get_report_settings(action.base_id)
            created = ReportSettings(
                name=action.name or copy_name(base.name, report_id),
                master_file_id=base.master_file_id,
                prefix=base.prefix,
                settings=dict(action.settings),
            )
        else:
            created = ReportSettings(
                name=action.name,
                master_file_id=action.master_file_id,
                prefix=action.prefix,
                settings=dict(action.settings),
            )
        self.report_settings_repo.add(created)
        return created

    async def _resolve_validator_settings(
        self, report_id: int, action: ValidatorSettingsAction
    ) -> ValidatorSettings:
        if isinstance(action, ReuseSettings):
            return await self._get_validator_settings(action.id)

        if isinstance(action, CloneSettings):
            base = await self._get_validator_settings(action.base_id)
            name = action.name or copy_name(base.name, report_id)
        else:
            name = action.name
        created = ValidatorSettings(name=name, settings=dict(action.settings))
        self.validator_settings_repo.add(created)
        return created

    async def _get_report_settings(self, settings_id: int) -> ReportSettings:
        settings = await self.report_settings_repo.get_by_id(settings_id)
        if settings is None:
            raise NotFoundError(f"Report settings {settings_id} not found")
        return settings

    async def _get_validator_settings(self, settings_id: int) -> ValidatorSettings:
        settings = await self.validator_settings_repo.get_by_id(settings_id)
        if settings is None:
            raise NotFoundError(f"Validator settings {settings_id} not found")
        return settings

    # --- Queries ---

    async def list_queries(self, report_id: int) -> ReportQueries:
        report = await self._get_report(report_id)
        queries = await self.query_repo.list_for_report(report_id)
        return ReportQueries(report_name=report.name, queries=[query_read(q) for q in queries])

    async def update_query(
        self, report_id: int, query_id: int, goal: str, search_queries: list[str]
    ) -> DataCollectionQueryRead:
        """Replace a linked query's goal and search queries.

        The goal is trimmed and blank search queries are dropped.
        """
        query = await self.query_repo.get_for_report(report_id, query_id)
        if query is None:
            raise NotFoundError(f"Query {query_id} not found in report {report_id}")
        if not goal.strip():
            raise ValidationError("Goal cannot be empty")

        content: dict[str, Any] = dict(query.query or {})
        content["goal"] = goal.strip()
        content["search_queries"] = [q for q in search_queries if q.strip()]
        # Reassigned so the JSON column is flagged dirty
        query.query = content
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        await self.session.refresh(query)

        logger.info("report_query_updated", report_id=report_id, query_id=query_id)
        return query_read(query)
