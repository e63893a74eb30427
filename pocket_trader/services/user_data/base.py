"""Shared access to tables that hold one user's rows"""
from typing import Any, ClassVar, Generic, List, Optional, Type, TypeVar
from uuid import UUID
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from pocket_trader.core.exceptions import NotFoundException
from pocket_trader.services.realtime import ChangeFeed, change_feed

M = TypeVar("M")


class UserTableService(Generic[M]):
    """
    CRUD on a per-user table

    Every query is filtered by ``user_id`` and every write is published on
    the change feed. Subclasses set ``model`` and may override
    ``order_by``.
    """

    model: ClassVar[Type[Any]]
    not_found_message: ClassVar[str] = "العنصر غير موجود"

    def __init__(self, db: AsyncSession, user_id: UUID, feed: Optional[ChangeFeed] = None):
        self.db = db
        self.user_id = user_id
        self.feed = feed or change_feed

    @property
    def table(self) -> str:
        return self.model.__tablename__

    def order_by(self):
        return self.model.created_at.desc()

    def _scoped(self) -> Select:
        return select(self.model).where(self.model.user_id == self.user_id)

    async def _all(self, query: Select) -> List[M]:
        result = await self.db.execute(query.order_by(self.order_by()))
        return list(result.scalars().all())

    async def list(self) -> List[M]:
        return await self._all(self._scoped())

    async def get(self, row_id: UUID) -> M:
        """
        One row owned by the user

        Raises:
            NotFoundException: no such row for this user
        """
        result = await self.db.execute(self._scoped().where(self.model.id == row_id))
        row = result.scalar_one_or_none()
        if row is None:
            raise NotFoundException(self.not_found_message, {"id": str(row_id)})
        return row

    async def create(self, **values: Any) -> M:
        row = self.model(user_id=self.user_id, **values)
        self.db.add(row)
        await self.db.commit()
        await self.db.refresh(row)
        logger.debug(f"{self.table}: inserted {row.id}")
        self.feed.publish(self.table, "INSERT", row)
        return row

    async def update(self, row_id: UUID, **values: Any) -> M:
        """Set the given columns; None values are skipped"""
        row = await self.get(row_id)
        for key, value in values.items():
            if value is not None:
                setattr(row, key, value)
        await self.db.commit()
        await self.db.refresh(row)
        self.feed.publish(self.table, "UPDATE", row)
        return row

    async def delete(self, row_id: UUID) -> None:
        row = await self.get(row_id)
        record = {"id": row.id, "user_id": row.user_id}
        await self.db.delete(row)
        await self.db.commit()
        logger.debug(f"{self.table}: deleted {row_id}")
        self.feed.publish(self.table, "DELETE", record)
