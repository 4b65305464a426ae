"""
Generic CRUD helpers shared by the chat tables.

Every table is keyed by a UUID ``id``. Helpers flush so generated values
(ids, defaults) are visible, but never commit: the persistence gateway
owns the transaction.

Dependencies: sqlalchemy
System role: Foundation for the session, message and attachment CRUD classes
"""

from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from chatflow.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Primary-key operations for one mapped model.

    Attributes:
        model: Mapped class this instance operates on
    """

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    async def create(self, session: AsyncSession, **values) -> ModelT:
        """
        Insert one row and reload it.

        Args:
            session: Open async session
            **values: Column values; omitted columns take their defaults

        Returns:
            The persisted row with database-side values loaded
        """
        row = self.model(**values)
        session.add(row)
        await session.flush()
        await session.refresh(row)
        return row

    async def get_by_id(self, session: AsyncSession, id: UUID) -> ModelT | None:
        return await session.get(self.model, id)

    async def update_by_id(self, session: AsyncSession, id: UUID, **values) -> ModelT | None:
        """
        Assign new column values to one row.

        Loads the row and sets attributes rather than issuing a bulk UPDATE,
        so ``onupdate`` defaults and the identity map stay consistent.

        Returns:
            The updated row, or None when no row has this id
        """
        row = await self.get_by_id(session, id)
        if row is None:
            return None
        for column, value in values.items():
            setattr(row, column, value)
        await session.flush()
        await session.refresh(row)
        return row

    async def exists(self, session: AsyncSession, id: UUID) -> bool:
        result = await session.execute(select(self.model.id).where(self.model.id == id))
        return result.scalar_one_or_none() is not None
