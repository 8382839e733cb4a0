"""SQLAlchemy CRUD Service — generic CrudService over one ORM model and one pydantic schema.

Invariants:
    - One session per call, opened through session_scope (auto-rollback on failure)
    - create() never writes the incoming id: the database assigns identity
    - read() returns None for a missing row; update()/delete() of a missing row raise
      ResourceNotFoundError (a service fault the dispatcher does not catch)
    - Rows never leave this module: callers only see schema instances
    - Declared references are checked before every write; a dangling one raises
      DomainValidationError (400) instead of relying on backend FK enforcement

Design Decisions:
    - ORM ↔ schema conversion via model_validate(from_attributes=True) and
      model_dump(exclude={"id"}): no per-resource mapping code
    - session_scope injected so tests and scripts can swap the session source
"""

import logging
from typing import AsyncContextManager, Callable, Generic

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crudflow.core.domain_types import EntityT, KeyT
from crudflow.core.errors import (
    DomainValidationError, ErrorContext, ResourceNotFoundError,
)
from crudflow.infrastructure import database

logger = logging.getLogger(__name__)

SessionScope = Callable[[], AsyncContextManager[AsyncSession]]


class SqlAlchemyCrudService(Generic[EntityT, KeyT]):
    """CrudService implementation backed by an async SQLAlchemy session."""

    def __init__(
        self,
        orm_model: type,
        schema: type[BaseModel],
        session_scope: SessionScope | None = None,
        resource: str | None = None,
        references: dict[str, type] | None = None,
    ):
        self._orm_model = orm_model
        self._schema = schema
        self._session_scope = session_scope or database.session_scope
        self._resource = resource or orm_model.__name__
        self._references = references or {}

    async def create(self, entity: EntityT) -> EntityT:
        row = self._orm_model(**self._columns(entity))
        async with self._session_scope() as db:
            await self._check_references(db, entity)
            db.add(row)
            await db.commit()
            await db.refresh(row)
            return self._to_entity(row)

    async def read(self, entity_id: KeyT) -> EntityT | None:
        async with self._session_scope() as db:
            row = await db.get(self._orm_model, entity_id)
            return None if row is None else self._to_entity(row)

    async def read_all(self) -> list[EntityT]:
        async with self._session_scope() as db:
            result = await db.execute(
                select(self._orm_model).order_by(self._orm_model.id),
            )
            return [self._to_entity(row) for row in result.scalars().all()]

    async def update(self, entity: EntityT) -> EntityT:
        async with self._session_scope() as db:
            row = await self._get_or_raise(db, entity.id, "update")
            await self._check_references(db, entity)
            for key, value in self._columns(entity).items():
                setattr(row, key, value)
            await db.commit()
            await db.refresh(row)
            return self._to_entity(row)

    async def delete(self, entity_id: KeyT) -> None:
        async with self._session_scope() as db:
            row = await self._get_or_raise(db, entity_id, "delete")
            await db.delete(row)
            await db.commit()

    async def _get_or_raise(self, db: AsyncSession, entity_id: KeyT, action: str):
        row = await db.get(self._orm_model, entity_id)
        if row is None:
            logger.warning(
                f"{self._resource} {entity_id} missing during {action}",
                extra={"resource": self._resource, "action": action},
            )
            raise ResourceNotFoundError(
                self._resource, str(entity_id),
                ErrorContext(
                    resource=self._resource, action=action,
                    entity_id=str(entity_id),
                ),
            )
        return row

    async def _check_references(self, db: AsyncSession, entity: EntityT) -> None:
        for field, target in self._references.items():
            value = getattr(entity, field)
            if value is not None and await db.get(target, value) is None:
                raise DomainValidationError(
                    f"{field} {value} does not exist", field=field,
                    context=ErrorContext(resource=self._resource),
                )

    def _columns(self, entity: EntityT) -> dict:
        return entity.model_dump(exclude={"id"})

    def _to_entity(self, row) -> EntityT:
        return self._schema.model_validate(row, from_attributes=True)
