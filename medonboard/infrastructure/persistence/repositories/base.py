"""Base repository: generic load, create, update and delete."""

from collections.abc import Iterable
from typing import Any

from sqlalchemy import inspect as sa_inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from medonboard.domain.exceptions import ResourceNotFoundException
from medonboard.infrastructure.persistence.database import Base


def is_loaded(obj: Base, attr: str) -> bool:
    """True when attr is populated on obj (never triggers a lazy load)."""
    return attr not in sa_inspect(obj).unloaded


class BaseRepository[ModelType: Base]:
    """Base repository with get_by_id, create, update and delete.

    Subclasses declare _mutable_fields to whitelist apply_fields.
    """

    _mutable_fields: frozenset[str] = frozenset()

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def get_or_raise(self, entity_id: str) -> ModelType:
        obj = await self.get_by_id(entity_id)
        if obj is None:
            raise ResourceNotFoundException(self.model.__name__.lower(), entity_id)
        return obj

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and return it refreshed."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    def apply_fields(self, obj: ModelType, fields: dict[str, Any]) -> list[str]:
        """Copy whitelisted fields onto obj; return the names actually applied."""
        applied = []
        for name, value in fields.items():
            if name in self._mutable_fields:
                setattr(obj, name, value)
                applied.append(name)
        return applied

    async def update(self, obj: ModelType) -> ModelType:
        """Flush pending changes on an attached obj and return it refreshed."""
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        """Delete the record."""
        await self.db.delete(obj)
        await self.db.flush()


def unique_ids(ids: Iterable[str]) -> list[str]:
    """De-duplicate ids keeping first-seen order."""
    return list(dict.fromkeys(i for i in ids if i))
