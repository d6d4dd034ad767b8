"""
Base repository shared by feature repositories.

Writes are flushed, never committed: the route handler owns the
transaction and commits once per request.

Usage:
    class ActivityRepository(BaseRepository[Activity]):
        def __init__(self, db: AsyncSession):
            super().__init__(db, Activity)
"""

from typing import TypeVar, Generic, Type

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """Primary-key and equality lookups, create and update for one model."""

    def __init__(self, db: AsyncSession, model: Type[T]):
        self.db = db
        self.model = model

    def _select(self, **filters) -> Select:
        query = select(self.model)
        for column, value in filters.items():
            query = query.where(getattr(self.model, column) == value)
        return query

    async def get_by_id(self, id: str) -> T | None:
        return await self.db.get(self.model, id)

    async def get_by(self, **filters) -> T | None:
        """First row whose columns equal the given values, or None."""
        result = await self.db.execute(self._select(**filters).limit(1))
        return result.scalar_one_or_none()

    async def create(self, **values) -> T:
        """
        Insert a row and load server-side defaults.

        Raises:
            sqlalchemy.exc.IntegrityError: If a unique constraint is violated
        """
        entity = self.model(**values)
        self.db.add(entity)
        await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def update(self, entity: T, **values) -> T:
        for column, value in values.items():
            setattr(entity, column, value)
        await self.db.flush()
        await self.db.refresh(entity)
        return entity
