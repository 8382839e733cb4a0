"""Dispatch Results — the three-way classification every dispatcher step produces.

Invariants:
    - Exactly one result per step; consumed exactly once by one adapter
    - NotFound covers both "entity absent" and "action disabled" (reason kept for logs)
    - ValidationFailed always carries the submitted state back for redisplay
    - Results are never persisted

Design Decisions:
    - Frozen dataclasses + isinstance/match over an exception-driven flow:
      the classification is total and test-covered (ADR: absence is data, not a fault)
    - ModelState lives here (not in api/) so the dispatcher can gate on it without
      knowing how it was bound
"""

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from crudflow.core.domain_types import CrudAction, EntityT, NotFoundReason

T = TypeVar("T")


@dataclass
class ModelState(Generic[EntityT]):
    """Submitted values, field errors, and the bound entity when binding succeeded."""
    values: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, list[str]] = field(default_factory=dict)
    entity: EntityT | None = None

    @property
    def is_valid(self) -> bool:
        return self.entity is not None and not self.errors

    @classmethod
    def valid(cls, entity: EntityT, values: dict[str, Any] | None = None) -> "ModelState[EntityT]":
        """State for an entity that already passed validation (e.g. a row loaded for editing)."""
        return cls(values=values or {}, entity=entity)


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Step succeeded. value is an entity, a collection, or None (delete / blank form)."""
    value: T
    form_context: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class NotFound:
    """Entity absent or action disabled — the boundary answers 404 for both."""
    action: CrudAction
    reason: NotFoundReason
    entity_id: Any = None


@dataclass(frozen=True)
class ValidationFailed(Generic[EntityT]):
    """Submitted model failed validation. Nothing was persisted."""
    state: ModelState[EntityT]


DispatchResult = Ok | NotFound | ValidationFailed
