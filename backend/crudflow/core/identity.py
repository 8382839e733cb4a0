"""Identity Contract — the single structural requirement placed on entities.

Invariants:
    - An entity exposes exactly one identity field named `id`
    - `id` is writable: the dispatcher reassigns it from the route on update

Design Decisions:
    - Protocol over base class: pydantic schemas satisfy it structurally
      (ADR: no inheritance hierarchy)
"""

from typing import Protocol, runtime_checkable

from crudflow.core.domain_types import KeyT


@runtime_checkable
class Identifiable(Protocol[KeyT]):
    """Anything with a mutable `id` of key type KeyT."""
    id: KeyT | None
