"""
Generic async repository.

Thin CRUD wrapper over one mapped model, keyed by opaque string ids.
Writes flush but do not commit; the calling service owns the transaction.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.app.core.exceptions import ResourceNotFoundError

ModelT = TypeVar("ModelT")


class Repository(Generic[ModelT]):

    def __init__(self, model: Type[ModelT], resource_name: Optional[str] = None):
        self.model = model
        self.resource_name = resource_name or model.__name__

    async def get(self, db: AsyncSession, entity_id: str, for_update: bool = False) -> Optional[ModelT]:
        query = select(self.model).where(self.model.id == entity_id)
        if for_update:
            # Row locks must see committed values, not whatever this session cached.
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_or_404(self, db: AsyncSession, entity_id: str, for_update: bool = False) -> ModelT:
        """
        Fetch by id.

        Raises:
            ResourceNotFoundError: No row with that id
        """
        entity = await self.get(db, entity_id, for_update=for_update)
        if entity is None:
            raise ResourceNotFoundError(self.resource_name, entity_id)
        return entity

    async def list(self, db: AsyncSession, order_by: Any = None, **filters) -> List[ModelT]:
        """All rows matching equality filters, newest first unless order_by is given."""
        query = select(self.model)
        for field, value in filters.items():
            query = query.where(getattr(self.model, field) == value)
        if order_by is None:
            order_by = self.model.created_at.desc()
        query = query.order_by(order_by)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def create(self, db: AsyncSession, data: Dict[str, Any]) -> ModelT:
        entity = self.model(**data)
        db.add(entity)
        await db.flush()
        await db.refresh(entity)
        return entity

    async def update(self, db: AsyncSession, entity: ModelT, data: Dict[str, Any]) -> ModelT:
        for field, value in data.items():
            setattr(entity, field, value)
        await db.flush()
        await db.refresh(entity)
        return entity

    async def delete(self, db: AsyncSession, entity: ModelT) -> None:
        await db.delete(entity)
        await db.flush()
