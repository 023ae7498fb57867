"""Ingestion of n8n workflow callbacks.

Every callback is correlated by ``execution_id`` only. Handlers overwrite the
same fields on each delivery, so retried callbacks are harmless.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.vitelis.core.exceptions import NotFoundError, UpstreamError, ValidationError
from src.vitelis.core.logging import bind_execution_context, get_logger
from src.vitelis.core.storage import ObjectStorage, build_object_key
from src.vitelis.models import (
    AnalysisKind,
    AnalyzeStatus,
    ExecutionStatus,
    SalesMinerAnalyze,
    VitelisSalesAnalyze,
)
from src.vitelis.models.base import utc_now
from src.vitelis.repositories import (
    AnalyzeRecordRepository,
    AnalyzeRepository,
    SalesMinerAnalyzeRepository,
    VitelisSalesAnalyzeRepository,
)
from src.vitelis.services.yaml_service import is_valid_yaml_file, parse_yaml, yaml_extension

logger = get_logger(__name__)

SALESMINER_YAML_FOLDER = "salesminer-yaml-files"


class WebhookService:
    def __init__(
        self,
        analyze_repo: AnalyzeRepository,
        sales_miner_repo: SalesMinerAnalyzeRepository,
        vitelis_sales_repo: VitelisSalesAnalyzeRepository,
        session: AsyncSession,
        storage: ObjectStorage | None = None,
    ):
        self.repos: dict[AnalysisKind, AnalyzeRecordRepository[Any]] = {
            AnalysisKind.BIZMINER: analyze_repo,
            AnalysisKind.SALESMINER: sales_miner_repo,
            AnalysisKind.VITELIS_SALES: vitelis_sales_repo,
        }
        self.session = session
        self.storage = storage

    async def _get_record(self, kind: AnalysisKind, execution_id: str) -> Any:
        if not execution_id:
            raise ValidationError("Missing required field: executionId")
        bind_execution_context(execution_id, kind.value)
        record = await self.repos[kind].get_by_execution_id(execution_id)
        if record is None:
            raise NotFoundError("Analyze record not found with the provided executionId")
        return record

    async def _save(self, record: Any) -> None:
        record.updated_at = utc_now()
        try:
            await self.session.commit()
            await self.session.refresh(record)
        except Exception:
            await self.session.rollback()
            raise

    async def _mark_finished(self, record: Any) -> None:
        record.execution_status = ExecutionStatus.FINISHED.value
        record.status = AnalyzeStatus.FINISHED.value
        await self._save(record)

    async def update_progress(
        self, kind: AnalysisKind, execution_id: str, step: int | float | None
    ) -> Any:
        """Record the workflow's current step.

        Step 0 means the run has started; anything above means it is in progress.
        """
        if step is None or isinstance(step, bool) or not isinstance(step, int | float):
            raise ValidationError("Step must be a non-negative number")
        if step < 0:
            raise ValidationError("Step must be a non-negative number")
        if isinstance(step, float) and not step.is_integer():
            raise ValidationError("Step must be a whole number")

        record = await self._get_record(kind, execution_id)
        record.execution_step = int(step)
        record.execution_status = (
            ExecutionStatus.IN_PROGRESS.value if step > 0 else ExecutionStatus.STARTED.value
        )
        await self._save(record)

        logger.info(
            "webhook_progress_updated",
            kind=kind.value,
            execution_id=execution_id,
            step=record.execution_step,
            execution_status=record.execution_status,
        )
        return record

    async def update_result(
        self,
        execution_id: str,
        data: str | None,
        summary: str | None = None,
        improvement_leverages: str | None = None,
        head_to_head: str | None = None,
        sources: str | None = None,
    ) -> Any:
        """Store BizMiner result text and finish the record."""
        record = await self._get_record(AnalysisKind.BIZMINER, execution_id)
        record.result_text = data
        record.summary = summary
        record.improvement_leverages = improvement_leverages
        record.head_to_head = head_to_head
        record.sources = sources
        await self._mark_finished(record)

        logger.info("webhook_result_stored", kind="bizminer", execution_id=execution_id)
        return record

    async def update_sales_miner_result(self, execution_id: str, data: str | None) -> Any:
        """Store SalesMiner inline text results and finish the record."""
        record: SalesMinerAnalyze = await self._get_record(AnalysisKind.SALESMINER, execution_id)
        record.result_text = data
        await self._mark_finished(record)
        logger.info("webhook_result_stored", kind="salesminer", execution_id=execution_id)
        return record

    async def update_yaml_result(
        self,
        execution_id: str,
        filename: str | None,
        content_type: str | None,
        content: bytes,
    ) -> Any:
        """Validate a SalesMiner YAML result, upload it, and store its storage key.

        The record is looked up first so unknown executions never upload.
        """
        if not is_valid_yaml_file(filename, content_type):
            raise ValidationError("Invalid file type. Only YAML files (.yaml, .yml) are allowed")

        parse_yaml(content)
        record: SalesMinerAnalyze = await self._get_record(AnalysisKind.SALESMINER, execution_id)

        if self.storage is None:
            raise UpstreamError("Object storage is not configured")

        extension = yaml_extension(filename) or ".yaml"
        key = build_object_key(SALESMINER_YAML_FOLDER, extension)
        await self.storage.upload(key, content, content_type or "application/x-yaml")

        record.yaml_file = key
        await self._mark_finished(record)

        logger.info(
            "webhook_yaml_stored",
            kind="salesminer",
            execution_id=execution_id,
            key=key,
        )
        return record

    async def update_vitelis_sales_result(
        self, execution_id: str, generated_report_id: str | None = None
    ) -> Any:
        record: VitelisSalesAnalyze = await self._get_record(
            AnalysisKind.VITELIS_SALES, execution_id
        )
        if generated_report_id is not None:
            record.generated_report_id = generated_report_id
        await self._mark_finished(record)
        logger.info("webhook_result_stored", kind="vitelis_sales", execution_id=execution_id)
        return record
