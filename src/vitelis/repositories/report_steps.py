"""Repositories for the step catalog, report step configuration and status cells."""

from sqlalchemy import func
from sqlmodel import col, select

from src.vitelis.models import GenerationStep, ReportOrchestrator, ReportStep, ReportStepStatus
from src.vitelis.repositories.base import BaseRepository


class GenerationStepRepository(BaseRepository[GenerationStep]):
    model = GenerationStep

    async def list_all(self) -> list[GenerationStep]:
        result = await self.session.execute(select(GenerationStep).order_by(col(GenerationStep.id)))
        return list(result.scalars().all())

    async def get_by_name(self, name: str) -> GenerationStep | None:
        result = await self.session.execute(
            select(GenerationStep).where(GenerationStep.name == name)
        )
        return result.scalar_one_or_none()


class ReportStepRepository(BaseRepository[ReportStep]):
    model = ReportStep

    async def list_with_steps(self, report_id: int) -> list[tuple[ReportStep, GenerationStep]]:
        """Configured steps joined with their catalog entries, in execution order."""
        result = await self.session.execute(
            select(ReportStep, GenerationStep)
            .join(GenerationStep, col(GenerationStep.id) == col(ReportStep.step_id))
            .where(ReportStep.report_id == report_id)
            .order_by(col(ReportStep.step_order), col(ReportStep.id))
        )
        return [(row[0], row[1]) for row in result.all()]

    async def get(self, report_id: int, step_id: int) -> ReportStep | None:
        result = await self.session.execute(
            select(ReportStep).where(
                ReportStep.report_id == report_id,
                ReportStep.step_id == step_id,
            )
        )
        return result.scalar_one_or_none()

    async def max_order(self, report_id: int) -> int:
        """Highest step_order in the report, 0 when no step is configured."""
        result = await self.session.execute(
            select(func.max(ReportStep.step_order)).where(ReportStep.report_id == report_id)
        )
        return result.scalar_one_or_none() or 0


class ReportStepStatusRepository(BaseRepository[ReportStepStatus]):
    model = ReportStepStatus

    async def list_for_report(self, report_id: int) -> list[ReportStepStatus]:
        result = await self.session.execute(
            select(ReportStepStatus).where(ReportStepStatus.report_id == report_id)
        )
        return list(result.scalars().all())

    async def list_for_company(
        self, report_id: int, company_id: int
    ) -> list[tuple[ReportStepStatus, GenerationStep]]:
        result = await self.session.execute(
            select(ReportStepStatus, GenerationStep)
            .join(GenerationStep, col(GenerationStep.id) == col(ReportStepStatus.step_id))
            .where(
                ReportStepStatus.report_id == report_id,
                ReportStepStatus.company_id == company_id,
            )
            .order_by(col(ReportStepStatus.step_id))
        )
        return [(row[0], row[1]) for row in result.all()]

    async def get_cell(
        self, report_id: int, company_id: int, step_id: int
    ) -> ReportStepStatus | None:
        result = await self.session.execute(
            select(ReportStepStatus).where(
                ReportStepStatus.report_id == report_id,
                ReportStepStatus.company_id == company_id,
                ReportStepStatus.step_id == step_id,
            )
        )
        return result.scalar_one_or_none()


class ReportOrchestratorRepository(BaseRepository[ReportOrchestrator]):
    model = ReportOrchestrator

    async def get_by_report(self, report_id: int) -> ReportOrchestrator | None:
        result = await self.session.execute(
            select(ReportOrchestrator).where(ReportOrchestrator.report_id == report_id)
        )
        return result.scalar_one_or_none()
