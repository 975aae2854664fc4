import uuid as uuid_pkg
from typing import Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseOperations(Generic[ModelType]):
    """Base CRUD operations for shop-owned models."""

    def __init__(self, model: type[ModelType]):
        self.model = model

    async def get(self, db: AsyncSession, id: uuid_pkg.UUID) -> ModelType | None:
        """Get a single record by ID."""
        statement = select(self.model).where(self.model.id == id)
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_shop(
        self,
        db: AsyncSession,
        shop_id: str,
        id: uuid_pkg.UUID,
    ) -> ModelType | None:
        """Get a record by ID, scoped to a shop."""
        statement = select(self.model).where(
            self.model.id == id,
            self.model.shop_id == shop_id,
        )
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    async def update_fields(
        self,
        db: AsyncSession,
        db_obj: ModelType,
        obj_in: dict,
    ) -> ModelType:
        """Patch columns on an existing record.

        All keys in obj_in are applied, including None values.
        Callers should use model_dump(exclude_unset=True) to omit
        fields that were not explicitly provided.
        """
        for field, value in obj_in.items():
            setattr(db_obj, field, value)
        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj
