"""
Base repository and query utilities.

This module provides the async CRUD repository every aggregate repository
builds on, plus small helpers for filtering and paginating SQLModel selects.
"""

from __future__ import annotations

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

EntityType = TypeVar("EntityType", bound=SQLModel)


class AsyncBaseRepository(Generic[EntityType]):
    """Async CRUD over one SQLModel entity.

    Writes commit immediately and refresh the instance, so callers always get
    back the stored row (generated ids and defaults included).

    Args:
        session: Async session shared by the repositories of one request
        model: Entity class handled by this repository
    """

    # Column ``list`` sorts by, newest first; None keeps insertion order.
    order_by: Optional[str] = None

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        self.session = session
        self.model = model

    async def _persist(self, entity: EntityType) -> EntityType:
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def create(self, entity: EntityType) -> EntityType:
        return await self._persist(entity)

    async def update(self, entity: EntityType) -> EntityType:
        return await self._persist(entity)

    async def get_by_id(self, entity_id: str) -> Optional[EntityType]:
        return await self.session.get(self.model, entity_id)

    async def delete(self, entity_id: str) -> bool:
        """Delete the row with primary key ``entity_id``.

        Returns:
            False when there was no such row
        """
        entity = await self.get_by_id(entity_id)
        if entity is None:
            return False
        await self.session.delete(entity)
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]:
        """List rows, optionally filtered by column equality and paginated.

        Args:
            limit: Maximum number of rows
            offset: Rows to skip
            filters: Column name to value; ``None`` values are ignored

        Returns:
            Matching rows, sorted by ``order_by`` when the repository sets it
        """
        stmt = select(self.model)
        if self.order_by is not None:
            stmt = stmt.order_by(getattr(self.model, self.order_by).desc())
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, self.model, filters)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class QueryBuilder:
    """Helpers that narrow SQLModel select statements."""

    @staticmethod
    def apply_filters(stmt, model: Type[EntityType], filters: Dict[str, Any]):
        """Add ``column == value`` clauses; ``None`` values and unknown columns are skipped."""
        for key, value in filters.items():
            if value is not None and hasattr(model, key):
                stmt = stmt.where(getattr(model, key) == value)
        return stmt

    @staticmethod
    def apply_pagination(stmt, limit: Optional[int], offset: Optional[int]):
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)
        return stmt
