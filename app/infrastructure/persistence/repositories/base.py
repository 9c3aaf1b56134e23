"""Base repository: row lookup, insert and delete helpers shared by the SQL stores."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository over one ORM model.

    Subclasses map rows to domain entities; this class only deals in rows.
    Writes flush but never commit: the caller owns the transaction.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def _get_row(self, entity_id: str, *, refresh: bool = False) -> ModelType | None:
        """Return a single row by primary key, or None.

        With refresh=True the identity map copy is overwritten from the
        database (needed after bulk UPDATEs in the same session).
        """
        model: Any = self.model
        stmt = select(self.model).where(model.id == entity_id)
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _add(self, obj: ModelType) -> ModelType:
        """Persist a new row and load server-generated columns."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def _delete(self, obj: ModelType) -> None:
        await self.db.delete(obj)
        await self.db.flush()

    def _dialect_name(self) -> str:
        return self.db.get_bind().dialect.name
