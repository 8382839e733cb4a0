"""CRUD Configuration — per-controller toggles, form hook, and create redirect policy.

Invariants:
    - Every CrudAction has a toggle; unknown actions read as disabled
    - Base variant: CLONE disabled, create redirects to Index
    - Full variant: CLONE enabled, create redirects to Details of the new entity
    - Toggles may change between requests; reads are last-write-wins (no locking)

Design Decisions:
    - Behavior as data, not subclassing: one dispatcher, two presets
      (ADR: no inheritance hierarchy)
    - on_prepare_form is async because real hooks query the database
      (e.g. dropdown options)
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from crudflow.core.dispatch_result import ModelState
from crudflow.core.domain_types import CrudAction, CreateSuccessTarget

PrepareFormHook = Callable[[ModelState | None], Awaitable[dict[str, Any]]]

_BASE_TOGGLES = {
    CrudAction.LIST: True,
    CrudAction.GET: True,
    CrudAction.CREATE: True,
    CrudAction.UPDATE: True,
    CrudAction.DELETE: True,
    CrudAction.CLONE: False,
}


@dataclass
class CrudConfig:
    """Toggles + extension points for one controller instance."""
    toggles: dict[CrudAction, bool] = field(
        default_factory=lambda: dict(_BASE_TOGGLES),
    )
    create_success_target: CreateSuccessTarget = CreateSuccessTarget.INDEX
    on_prepare_form: PrepareFormHook | None = None

    @classmethod
    def base(
        cls, on_prepare_form: PrepareFormHook | None = None, **overrides: bool,
    ) -> "CrudConfig":
        """Base variant: Clone off, Create → Index."""
        return cls(
            toggles=_with_overrides(_BASE_TOGGLES, overrides),
            create_success_target=CreateSuccessTarget.INDEX,
            on_prepare_form=on_prepare_form,
        )

    @classmethod
    def full(
        cls, on_prepare_form: PrepareFormHook | None = None, **overrides: bool,
    ) -> "CrudConfig":
        """Full variant: Clone on, Create → Details of the new entity."""
        defaults = {**_BASE_TOGGLES, CrudAction.CLONE: True}
        return cls(
            toggles=_with_overrides(defaults, overrides),
            create_success_target=CreateSuccessTarget.DETAILS_OF_NEW,
            on_prepare_form=on_prepare_form,
        )

    def is_enabled(self, action: CrudAction) -> bool:
        return self.toggles.get(action, False)

    def enable(self, action: CrudAction) -> None:
        self.toggles[action] = True

    def disable(self, action: CrudAction) -> None:
        self.toggles[action] = False


def _with_overrides(
    defaults: dict[CrudAction, bool], overrides: dict[str, bool],
) -> dict[CrudAction, bool]:
    """Apply keyword overrides (list=False, clone=True, ...) to a toggle map."""
    toggles = dict(defaults)
    for name, enabled in overrides.items():
        toggles[CrudAction(name)] = bool(enabled)
    return toggles
