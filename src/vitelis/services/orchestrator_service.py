"""Report-level orchestrator control and engine tick dispatch."""

import json
from typing import Any, Protocol

import httpx
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.vitelis.core.config import Settings
from src.vitelis.core.exceptions import ConflictError, NotFoundError, UpstreamError, ValidationError
from src.vitelis.core.logging import get_logger
from src.vitelis.models import ReportOrchestrator, StepStatus
from src.vitelis.models.base import utc_now
from src.vitelis.repositories import (
    ReportOrchestratorRepository,
    ReportRepository,
    ReportStepRepository,
)
from src.vitelis.schemas.report_steps import (
    EngineTickResponse,
    OrchestratorRead,
    OrchestratorStartResponse,
)

logger = get_logger(__name__)


def merge_metadata(
    existing: dict[str, Any] | None, patch: dict[str, Any]
) -> dict[str, Any]:
    """Apply a metadata patch: null values delete keys, absent keys are kept."""
    merged = {**(existing or {}), **patch}
    return {key: value for key, value in merged.items() if value is not None}


def engine_channel(instance: int) -> str:
    """Notification channel of engine instance ``instance`` (1-based)."""
    return "engine_tick" if instance == 1 else f"engine_tick_inst{instance}"


class EngineNotifier(Protocol):
    async def notify(self, channel: str, payload: str) -> None: ...


class PgNotifyEngineNotifier:
    """Fire-and-forget NOTIFY on the shared Postgres database."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def notify(self, channel: str, payload: str) -> None:
        await self.session.execute(
            text("SELECT pg_notify(:channel, :payload)"),
            {"channel": channel, "payload": payload},
        )
        # NOTIFY is delivered on commit
        await self.session.commit()


class OrchestratorService:
    def __init__(
        self,
        orchestrator_repo: ReportOrchestratorRepository,
        report_step_repo: ReportStepRepository,
        report_repo: ReportRepository,
        session: AsyncSession,
        settings: Settings,
        notifier: EngineNotifier | None = None,
    ):
        self.orchestrator_repo = orchestrator_repo
        self.report_step_repo = report_step_repo
        self.report_repo = report_repo
        self.session = session
        self.settings = settings
        self.notifier = notifier or PgNotifyEngineNotifier(session)

    @staticmethod
    def _to_read(report_id: int, record: ReportOrchestrator | None) -> OrchestratorRead:
        if record is None:
            return OrchestratorRead(report_id=report_id, status=StepStatus.PENDING, metadata=None)
        return OrchestratorRead(
            report_id=report_id, status=StepStatus(record.status), metadata=record.meta
        )

    async def _save(self, record: ReportOrchestrator) -> None:
        record.updated_at = utc_now()
        try:
            await self.session.commit()
            await self.session.refresh(record)
        except Exception:
            await self.session.rollback()
            raise

    async def _require_report(self, report_id: int) -> None:
        if await self.report_repo.get_by_id(report_id) is None:
            raise NotFoundError(f"Report {report_id} not found")

    async def get_orchestrator_status(self, report_id: int) -> OrchestratorRead:
        """Current orchestrator state; PENDING with no metadata when never set."""
        record = await self.orchestrator_repo.get_by_report(report_id)
        return self._to_read(report_id, record)

    async def update_orchestrator(
        self,
        report_id: int,
        status: StepStatus | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> OrchestratorRead:
        """Overwrite status and/or patch metadata.

        A metadata-only patch needs an existing record; setting a status
        creates the record when missing, provided the report exists.
        """
        if status is None and metadata is None:
            raise ValidationError("Either status or metadata must be provided")

        record = await self.orchestrator_repo.get_by_report(report_id)
        if record is None:
            if status is None:
                raise NotFoundError(f"Orchestrator for report {report_id} not found")
            await self._require_report(report_id)
            record = ReportOrchestrator(report_id=report_id, status=status.value)
            self.orchestrator_repo.add(record)

        if status is not None:
            record.status = status.value
        if metadata is not None:
            record.meta = merge_metadata(record.meta, metadata)

        await self._save(record)
        logger.info(
            "orchestrator_updated",
            report_id=report_id,
            status=record.status,
            metadata_keys=sorted(metadata or {}),
        )
        return self._to_read(report_id, record)

    async def start_orchestrator(
        self, report_id: int, parallel_limit: int = 1
    ) -> OrchestratorStartResponse:
        """Mark the report PROCESSING and notify the orchestrator workflow.

        A failed webhook call is logged and does not undo the status change.
        """
        await self._require_report(report_id)
        configured = await self.report_step_repo.list_with_steps(report_id)
        step_ids = [report_step.step_id for report_step, _ in configured]

        record = await self.orchestrator_repo.get_by_report(report_id)
        if record is None:
            record = ReportOrchestrator(report_id=report_id)
            self.orchestrator_repo.add(record)
        record.status = StepStatus.PROCESSING.value
        record.meta = merge_metadata(
            record.meta,
            {"parallel_limit": parallel_limit, "started_at": utc_now().isoformat()},
        )
        await self._save(record)
        logger.info("orchestrator_started", report_id=report_id, parallel_limit=parallel_limit)

        webhook_url = self.settings.n8n_orchestrator_webhook
        if webhook_url:
            try:
                async with httpx.AsyncClient(timeout=self.settings.n8n_timeout_seconds) as client:
                    response = await client.post(
                        webhook_url,
                        json={
                            "report_id": report_id,
                            "parallel_limit": parallel_limit,
                            "steps": step_ids,
                        },
                    )
                    response.raise_for_status()
            except httpx.HTTPError as e:
                logger.error(
                    "orchestrator_webhook_failed", report_id=report_id, error=str(e)
                )

        return OrchestratorStartResponse(status=StepStatus.PROCESSING, steps=step_ids)

    async def trigger_engine_tick(self, report_id: int, instance: int = 1) -> EngineTickResponse:
        """Send a one-way tick to an engine instance. Only allowed while PROCESSING."""
        if instance < 1:
            raise ValidationError("Instance must be a positive integer")

        record = await self.orchestrator_repo.get_by_report(report_id)
        status = StepStatus(record.status) if record else StepStatus.PENDING
        if status != StepStatus.PROCESSING:
            raise ConflictError(
                f"Engine tick requires orchestrator status PROCESSING, got {status.value}"
            )

        channel = engine_channel(instance)
        try:
            await self.notifier.notify(channel, json.dumps({"report_id": report_id}))
        except SQLAlchemyError as e:
            logger.error(
                "engine_tick_failed", report_id=report_id, channel=channel, error=str(e)
            )
            raise UpstreamError("Failed to dispatch engine tick") from e

        logger.info("engine_tick_sent", report_id=report_id, channel=channel)
        return EngineTickResponse(accepted=True, report_id=report_id, channel=channel)
