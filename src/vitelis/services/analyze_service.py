"""CRUD for analysis records with credit metering."""

from typing import Any
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from src.vitelis.core.exceptions import AuthorizationError, NotFoundError
from src.vitelis.core.logging import get_logger
from src.vitelis.models import AnalysisKind, ExecutionStatus, User
from src.vitelis.models.base import utc_now
from src.vitelis.repositories import AnalyzeRecordRepository
from src.vitelis.services.credits_service import CreditsService

logger = get_logger(__name__)

# Credits charged per analysis ordered by a role=user account
ANALYSIS_COST = 1

# Families whose creation is charged
METERED_KINDS = frozenset({AnalysisKind.BIZMINER, AnalysisKind.SALESMINER})


class AnalyzeService:
    """Service shared by BizMiner, SalesMiner and VitelisSales records.

    ``kind`` only labels log events; the repository decides the table.
    """

    def __init__(
        self,
        repo: AnalyzeRecordRepository[Any],
        credits_service: CreditsService,
        session: AsyncSession,
        kind: AnalysisKind,
    ):
        self.repo = repo
        self.credits_service = credits_service
        self.session = session
        self.kind = kind

    async def get_for_user(self, record_id: UUID, user: User) -> Any:
        """Get a record the caller may see (own records, or any for admins)."""
        record = await self.repo.get_by_id(record_id)
        if record is None:
            raise NotFoundError(f"Analysis {record_id} not found")
        if not user.is_admin and record.user_id != user.id:
            raise AuthorizationError("Access denied to this analysis")
        return record

    async def list_for_user(
        self, user: User, page: int, limit: int, owner_id: UUID | None = None
    ) -> tuple[list[Any], int]:
        """Admins list everything (optionally one owner); users list their own."""
        if user.is_admin:
            return await self.repo.list_for_user(owner_id, page, limit)
        return await self.repo.list_for_user(user.id, page, limit)

    async def get_latest_in_progress(self, user: User) -> Any | None:
        model = self.repo.model
        result = await self.session.execute(
            select(model)
            .where(
                col(model.user_id) == user.id,
                col(model.execution_status).in_(
                    [ExecutionStatus.STARTED.value, ExecutionStatus.IN_PROGRESS.value]
                ),
            )
            .order_by(col(model.created_at).desc())
            .limit(1)
        )
        return result.scalars().first()

    async def create(self, data: BaseModel, user: User) -> Any:
        """Create a record owned by ``user``; metered kinds charge role=user one credit.

        A failed deduction does not undo the record; it is logged for follow-up.
        """
        record = self.repo.model(**data.model_dump(), user_id=user.id)
        self.repo.add(record)
        try:
            await self.session.commit()
            await self.session.refresh(record)
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "analysis_created",
            kind=self.kind.value,
            analysis_id=str(record.id),
            execution_id=record.execution_id,
        )

        if self.kind in METERED_KINDS and not user.is_admin:
            deducted = await self.credits_service.deduct_credits(user.id, ANALYSIS_COST)
            if not deducted:
                logger.error(
                    "analysis_credit_deduction_failed",
                    kind=self.kind.value,
                    analysis_id=str(record.id),
                    user_id=str(user.id),
                )
        return record

    async def update(self, record: Any, data: BaseModel) -> Any:
        """Apply a partial update; a move from inProgress to error refunds a credit."""
        update_data = data.model_dump(exclude_unset=True)
        old_execution_status = record.execution_status

        for field, value in update_data.items():
            setattr(record, field, value)
        record.updated_at = utc_now()

        try:
            await self.session.commit()
            await self.session.refresh(record)
        except Exception:
            await self.session.rollback()
            raise

        if "execution_status" in update_data:
            await self.credits_service.handle_status_change_refund(
                record.user_id, old_execution_status, record.execution_status
            )
        return record

    async def delete(self, record: Any) -> None:
        await self.repo.delete(record)
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("analysis_deleted", kind=self.kind.value, analysis_id=str(record.id))
