"""Base repository with common CRUD operations."""

from typing import Any

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from src.vitelis.schemas.pagination import page_offset


class BaseRepository[ModelType: SQLModel]:
    """Base repository providing common database operations.

    Repositories handle data access only. Transaction control (commit)
    should be done in the service layer.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: Any) -> ModelType | None:
        """Get a record by its primary key."""
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        )
        return result.scalar_one_or_none()

    def add(self, entity: ModelType) -> None:
        """Add entity to session (no flush/commit)."""
        self.session.add(entity)

    async def delete(self, entity: ModelType) -> None:
        """Mark entity for deletion (no commit)."""
        await self.session.delete(entity)

    async def paginate(
        self,
        query: Any,  # SelectOfScalar or Select - SQLModel/SQLAlchemy query
        page: int,
        limit: int,
        order_by: Any,
    ) -> tuple[list[ModelType], int]:
        """Execute page-numbered pagination on a query.

        Args:
            query: The base SQLAlchemy query to paginate
            page: 1-based page number
            limit: Maximum number of items to return
            order_by: Ordering clause, e.g. ``Model.created_at.desc()``

        Returns:
            Tuple of (items, total)
        """
        count_query = select(func.count()).select_from(query.order_by(None).subquery())
        total = (await self.session.execute(count_query)).scalar_one()

        query = query.order_by(order_by).offset(page_offset(page, limit)).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all()), total
