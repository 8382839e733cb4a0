"""Boundary Protocols — the persistence contract consumed by the dispatcher.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - read() signals absence with None, never with an exception
    - create() assigns a fresh identity; any identity already on the input is ignored
    - Any method may raise a service fault; callers in core do not catch it

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO, the dispatcher awaits exactly once
      per call and never retries
"""

from typing import Protocol, Sequence

from crudflow.core.domain_types import EntityT, KeyT


class CrudService(Protocol[EntityT, KeyT]):
    """Contract for entity persistence — implemented by shell."""
    async def create(self, entity: EntityT) -> EntityT: ...
    async def read(self, entity_id: KeyT) -> EntityT | None: ...
    async def read_all(self) -> Sequence[EntityT]: ...
    async def update(self, entity: EntityT) -> EntityT: ...
    async def delete(self, entity_id: KeyT) -> None: ...
