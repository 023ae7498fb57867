"""Step catalog, per-report step configuration and the company x step status matrix."""

from collections import Counter
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.vitelis.core.exceptions import ConflictError, NotFoundError, ValidationError
from src.vitelis.core.logging import get_logger
from src.vitelis.models import GenerationStep, Report, ReportStep, ReportStepStatus, StepStatus
from src.vitelis.models.base import utc_now
from src.vitelis.repositories import (
    GenerationStepRepository,
    ReportRepository,
    ReportStepRepository,
    ReportStepStatusRepository,
)
from src.vitelis.schemas.report_steps import (
    AddStepResponse,
    CompanyStepStatusRead,
    ConfiguredStepRead,
    GenerationStepCreate,
    GenerationStepRead,
    MatrixCell,
    MatrixCompany,
    MatrixRow,
    MatrixStep,
    ReportStepsRead,
    StepOverview,
    StepsMatrix,
    StepStatusItem,
    StepStatusRead,
)

logger = get_logger(__name__)


class ReportStepsService:
    def __init__(
        self,
        step_repo: GenerationStepRepository,
        report_step_repo: ReportStepRepository,
        status_repo: ReportStepStatusRepository,
        report_repo: ReportRepository,
        session: AsyncSession,
    ):
        self.step_repo = step_repo
        self.report_step_repo = report_step_repo
        self.status_repo = status_repo
        self.report_repo = report_repo
        self.session = session

    async def _get_report(self, report_id: int) -> Report:
        report = await self.report_repo.get_by_id(report_id)
        if report is None:
            raise NotFoundError(f"Report {report_id} not found")
        return report

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    # --- Catalog ---

    async def list_generation_steps(self) -> list[GenerationStepRead]:
        steps = await self.step_repo.list_all()
        return [GenerationStepRead.model_validate(s) for s in steps]

    async def create_generation_step(self, data: GenerationStepCreate) -> GenerationStepRead:
        if await self.step_repo.get_by_name(data.name) is not None:
            raise ConflictError(f"Generation step '{data.name}' already exists")

        step = GenerationStep(
            name=data.name,
            url=data.url,
            dependency=data.dependency,
            settings=data.settings or None,
        )
        self.step_repo.add(step)
        try:
            await self.session.commit()
            await self.session.refresh(step)
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError(f"Generation step '{data.name}' already exists") from e
        return GenerationStepRead.model_validate(step)

    async def update_generation_step_settings(
        self,
        step_id: int,
        settings: dict[str, str] | None,
        report_id: int | None = None,
    ) -> GenerationStepRead:
        """Replace a step's settings map; an empty map clears it.

        With ``report_id`` the step must be configured for that report.
        """
        step = await self.step_repo.get_by_id(step_id)
        if step is None:
            raise NotFoundError("Step not found")
        if report_id is not None and await self.report_step_repo.get(report_id, step_id) is None:
            raise NotFoundError("Step not found in report")

        step.settings = dict(settings) if settings else None
        await self._commit()
        await self.session.refresh(step)

        logger.info("step_settings_replaced", step_id=step_id, keys=sorted(settings or {}))
        return GenerationStepRead.model_validate(step)

    # --- Report configuration ---

    async def get_report_steps(self, report_id: int) -> ReportStepsRead:
        """Configured steps in order, plus catalog steps not yet attached."""
        configured = await self.report_step_repo.list_with_steps(report_id)
        catalog = await self.step_repo.list_all()
        configured_ids = {report_step.step_id for report_step, _ in configured}

        return ReportStepsRead(
            configured=[
                ConfiguredStepRead(
                    id=step.id,
                    name=step.name,
                    url=step.url,
                    dependency=step.dependency,
                    settings=step.settings,
                    order=report_step.step_order,
                )
                for report_step, step in configured
            ],
            available=[
                GenerationStepRead.model_validate(s) for s in catalog if s.id not in configured_ids
            ],
        )

    async def add_step_to_report(self, report_id: int, step_id: int) -> AddStepResponse:
        """Attach a catalog step at the end of the report's order."""
        await self._get_report(report_id)
        step = await self.step_repo.get_by_id(step_id)
        if step is None:
            raise NotFoundError("Step not found")
        if await self.report_step_repo.get(report_id, step_id) is not None:
            raise ConflictError("Step already exists in report")

        order = await self.report_step_repo.max_order(report_id) + 1
        report_step = ReportStep(report_id=report_id, step_id=step_id, step_order=order)
        self.report_step_repo.add(report_step)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError("Step already exists in report") from e

        logger.info("report_step_added", report_id=report_id, step_id=step_id, order=order)
        return AddStepResponse(id=step_id, name=step.name, order=order)

    async def remove_step_from_report(self, report_id: int, step_id: int) -> None:
        """Detach a step. Remaining steps keep their order values."""
        report_step = await self.report_step_repo.get(report_id, step_id)
        if report_step is None:
            raise NotFoundError("Step not found in report")
        await self.report_step_repo.delete(report_step)
        await self._commit()
        logger.info("report_step_removed", report_id=report_id, step_id=step_id)

    async def update_step_order(self, report_id: int, step_id: int, order: int) -> None:
        """Set one step's order. Other steps are untouched, so ties are possible."""
        if order < 1:
            raise ValidationError("Order must be a positive integer")
        report_step = await self.report_step_repo.get(report_id, step_id)
        if report_step is None:
            raise NotFoundError("Step not found in report")
        report_step.step_order = order
        await self._commit()

    async def reorder_steps(self, report_id: int, ordered_step_ids: list[int]) -> None:
        """Renumber the listed steps 1..n in the given order, in one transaction."""
        configured = {
            report_step.step_id: report_step
            for report_step, _ in await self.report_step_repo.list_with_steps(report_id)
        }
        unknown = [step_id for step_id in ordered_step_ids if step_id not in configured]
        if unknown:
            raise NotFoundError(f"Steps not found in report: {unknown}")

        for index, step_id in enumerate(ordered_step_ids, start=1):
            configured[step_id].step_order = index
        await self._commit()
        logger.info("report_steps_reordered", report_id=report_id, steps=ordered_step_ids)

    # --- Status matrix ---

    async def get_steps_matrix(self, report_id: int) -> StepsMatrix:
        """Every company x configured step cell; cells never written read PENDING."""
        await self._get_report(report_id)
        companies = await self.report_repo.list_companies(report_id)
        configured = await self.report_step_repo.list_with_steps(report_id)
        cells = {
            (cell.company_id, cell.step_id): StepStatus(cell.status)
            for cell in await self.status_repo.list_for_report(report_id)
        }

        steps = [
            MatrixStep(id=step.id, name=step.name, order=report_step.step_order)
            for report_step, step in configured
        ]
        return StepsMatrix(
            companies=[MatrixCompany(id=c.id, name=c.name) for c in companies],
            steps=steps,
            matrix=[
                MatrixRow(
                    company_id=company.id,
                    statuses=[
                        MatrixCell(
                            step_id=step.id,
                            status=cells.get((company.id, step.id), StepStatus.PENDING),
                        )
                        for step in steps
                    ],
                )
                for company in companies
            ],
        )

    async def _upsert_cell(
        self,
        report_id: int,
        company_id: int,
        step_id: int,
        status: StepStatus,
        metadata: dict[str, Any] | None,
    ) -> ReportStepStatus:
        cell = await self.status_repo.get_cell(report_id, company_id, step_id)
        if cell is None:
            cell = ReportStepStatus(
                report_id=report_id,
                company_id=company_id,
                step_id=step_id,
                status=status.value,
                meta=metadata,
            )
            self.status_repo.add(cell)
        else:
            cell.status = status.value
            if metadata is not None:
                cell.meta = metadata
            cell.updated_at = utc_now()
        return cell

    async def update_step_status(
        self,
        report_id: int,
        company_id: int,
        step_id: int,
        status: StepStatus,
        metadata: dict[str, Any] | None = None,
    ) -> StepStatusRead:
        """Upsert one cell. Any status may replace any other."""
        cell = await self._upsert_cell(report_id, company_id, step_id, status, metadata)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise NotFoundError("Report, company or step not found") from e
        await self.session.refresh(cell)

        logger.info(
            "step_status_updated",
            report_id=report_id,
            company_id=company_id,
            step_id=step_id,
            status=status.value,
        )
        return StepStatusRead(
            report_id=cell.report_id,
            company_id=cell.company_id,
            step_id=cell.step_id,
            status=StepStatus(cell.status),
            metadata=cell.meta,
            updated_at=cell.updated_at,
        )

    async def bulk_update_step_statuses(
        self, report_id: int, company_id: int, updates: list[StepStatusItem]
    ) -> int:
        """Upsert several cells of one company atomically. Returns the count written."""
        try:
            for item in updates:
                await self._upsert_cell(
                    report_id, company_id, item.step_id, item.status, item.metadata
                )
                # Flush so a repeated step_id in the same batch updates the pending row
                await self.session.flush()
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise NotFoundError("Report, company or step not found") from e
        return len(updates)

    async def get_company_step_statuses(
        self, report_id: int, company_id: int
    ) -> list[CompanyStepStatusRead]:
        rows = await self.status_repo.list_for_company(report_id, company_id)
        return [
            CompanyStepStatusRead(
                step_id=cell.step_id,
                step_name=step.name,
                status=StepStatus(cell.status),
                metadata=cell.meta,
                updated_at=cell.updated_at,
            )
            for cell, step in rows
        ]

    async def get_steps_overview(self, report_id: int) -> list[StepOverview]:
        """Per configured step, how many explicit cells hold each status."""
        configured = await self.report_step_repo.list_with_steps(report_id)
        counts = Counter(
            (cell.step_id, StepStatus(cell.status))
            for cell in await self.status_repo.list_for_report(report_id)
        )
        return [
            StepOverview(
                step_id=step.id,
                name=step.name,
                order=report_step.step_order,
                counts={status: counts[(step.id, status)] for status in StepStatus},
            )
            for report_step, step in configured
        ]
