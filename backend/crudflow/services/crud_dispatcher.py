"""CRUD Dispatcher — toggle check → fetch/validate → mutate → classify, for every step.

Invariants:
    - A disabled action classifies as NotFound for every input, before any IO or validation
    - read() returning None classifies as NotFound; it is never treated as a fault
    - Invalid submissions classify as ValidationFailed and never reach persistence
    - Update always persists with the route id: the submitted identity is overwritten
    - One awaited persistence call per step, except CLONE (read, then create — sequential)
    - Persistence faults propagate untouched (no try/except, no retries)
    - No caching, no locks: toggles are read once per step from CrudConfig

Design Decisions:
    - Explicit step → handler dict, same as a tool dispatch table: every mapping
      visible in one place (ADR: no getattr magic)
    - Composition over inheritance: service and config injected at construction,
      presentation handled by separate adapters (api/view_adapter.py, api/resource_adapter.py)
    - The prepare-form hook is invoked here for form displays; the view adapter
      re-invokes it through prepare_form() before a validation re-render
"""

import logging
from typing import Any, Generic

from crudflow.core.crud_config import CrudConfig
from crudflow.core.dispatch_result import (
    DispatchResult, ModelState, NotFound, Ok, ValidationFailed,
)
from crudflow.core.domain_types import (
    STEP_ACTIONS, CrudAction, CrudStep, EntityT, KeyT, NotFoundReason,
)
from crudflow.core.identity import Identifiable
from crudflow.core.model_binding import state_from_entity
from crudflow.core.repository_protocols import CrudService

logger = logging.getLogger(__name__)


class CrudDispatcher(Generic[EntityT, KeyT]):
    """Routes CrudStep -> handler over an injected CrudService."""

    def __init__(
        self,
        service: CrudService[EntityT, KeyT],
        config: CrudConfig | None = None,
        resource: str = "entity",
    ):
        self.service = service
        self.config = config or CrudConfig.base()
        self.resource = resource

        # ADR: every mapping explicit — adding a step requires editing this dict
        self._handlers = {
            CrudStep.LIST: self.list,
            CrudStep.DETAILS: self.details,
            CrudStep.CREATE_FORM: self.create_form,
            CrudStep.CREATE: self.create,
            CrudStep.EDIT_FORM: self.edit_form,
            CrudStep.EDIT: self.edit,
            CrudStep.DELETE_CONFIRM: self.delete_confirm,
            CrudStep.DELETE: self.delete,
            CrudStep.CLONE_CONFIRM: self.clone_confirm,
            CrudStep.CLONE: self.clone,
        }

    async def execute(self, step: CrudStep, **payload: Any) -> DispatchResult:
        """Route a step tag to its handler. payload is the handler's keyword arguments."""
        return await self._handlers[step](**payload)

    def is_enabled(self, action: CrudAction) -> bool:
        return self.config.is_enabled(action)

    def is_step_enabled(self, step: CrudStep) -> bool:
        return self.config.is_enabled(STEP_ACTIONS[step])

    async def prepare_form(self, state: ModelState | None) -> dict[str, Any]:
        """Run the configured form hook. Empty dict when none is configured."""
        hook = self.config.on_prepare_form
        if hook is None:
            return {}
        return dict(await hook(state))

    # ─── List / Details ─────────────────────────────────────────

    async def list(self) -> DispatchResult:
        if not self.is_enabled(CrudAction.LIST):
            return self._disabled(CrudAction.LIST)
        return Ok(list(await self.service.read_all()))

    async def details(self, entity_id: KeyT) -> DispatchResult:
        return await self._read_gated(CrudAction.GET, entity_id)

    # ─── Create ─────────────────────────────────────────────────

    async def create_form(self) -> DispatchResult:
        """Blank create form. No persistence call."""
        if not self.is_enabled(CrudAction.CREATE):
            return self._disabled(CrudAction.CREATE)
        return Ok(None, form_context=await self.prepare_form(None))

    async def create(self, state: ModelState[EntityT]) -> DispatchResult:
        if not self.is_enabled(CrudAction.CREATE):
            return self._disabled(CrudAction.CREATE)
        if not state.is_valid:
            return ValidationFailed(state)
        created = await self.service.create(state.entity)
        self._log_mutation(CrudAction.CREATE, created.id)
        return Ok(created)

    # ─── Edit ───────────────────────────────────────────────────

    async def edit_form(self, entity_id: KeyT) -> DispatchResult:
        result = await self._read_gated(CrudAction.UPDATE, entity_id)
        if not isinstance(result, Ok):
            return result
        form_context = await self.prepare_form(state_from_entity(result.value))
        return Ok(result.value, form_context=form_context)

    async def edit(
        self, entity_id: KeyT, state: ModelState[EntityT],
    ) -> DispatchResult:
        if not self.is_enabled(CrudAction.UPDATE):
            return self._disabled(CrudAction.UPDATE, entity_id)
        if not state.is_valid:
            return ValidationFailed(state)
        entity: Identifiable[KeyT] = state.entity
        # Route id wins over any id in the submitted body
        entity.id = entity_id
        updated = await self.service.update(entity)
        self._log_mutation(CrudAction.UPDATE, entity_id)
        return Ok(updated)

    # ─── Delete ─────────────────────────────────────────────────

    async def delete_confirm(self, entity_id: KeyT) -> DispatchResult:
        return await self._read_gated(CrudAction.DELETE, entity_id)

    async def delete(self, entity_id: KeyT) -> DispatchResult:
        if not self.is_enabled(CrudAction.DELETE):
            return self._disabled(CrudAction.DELETE, entity_id)
        await self.service.delete(entity_id)
        self._log_mutation(CrudAction.DELETE, entity_id)
        return Ok(None)

    # ─── Clone ──────────────────────────────────────────────────

    async def clone_confirm(self, entity_id: KeyT) -> DispatchResult:
        return await self._read_gated(CrudAction.CLONE, entity_id)

    async def clone(self, entity_id: KeyT) -> DispatchResult:
        """Read the source, then create a copy. create never runs if the read misses."""
        result = await self._read_gated(CrudAction.CLONE, entity_id)
        if not isinstance(result, Ok):
            return result
        cloned = await self.service.create(result.value)
        self._log_mutation(CrudAction.CLONE, cloned.id, source_id=entity_id)
        return Ok(cloned)

    # ─── Helpers ────────────────────────────────────────────────

    async def _read_gated(
        self, action: CrudAction, entity_id: KeyT,
    ) -> DispatchResult:
        """Toggle check + single read. Shared by every id-addressed step."""
        if not self.is_enabled(action):
            return self._disabled(action, entity_id)
        entity = await self.service.read(entity_id)
        if entity is None:
            logger.info(
                f"{self.resource} {entity_id} not found",
                extra=self._extra(action, entity_id, NotFoundReason.ABSENT),
            )
            return NotFound(action, NotFoundReason.ABSENT, entity_id)
        return Ok(entity)

    def _disabled(
        self, action: CrudAction, entity_id: KeyT | None = None,
    ) -> NotFound:
        logger.info(
            f"{self.resource} action '{action.value}' is disabled",
            extra=self._extra(action, entity_id, NotFoundReason.DISABLED),
        )
        return NotFound(action, NotFoundReason.DISABLED, entity_id)

    def _log_mutation(
        self, action: CrudAction, entity_id: Any, source_id: Any = None,
    ) -> None:
        suffix = f" from {source_id}" if source_id is not None else ""
        logger.info(
            f"{self.resource} {entity_id}: {action.value}{suffix}",
            extra=self._extra(action, entity_id),
        )

    def _extra(
        self, action: CrudAction, entity_id: Any,
        reason: NotFoundReason | None = None,
    ) -> dict[str, Any]:
        extra: dict[str, Any] = {
            "resource": self.resource,
            "action": action.value,
            "entity_id": None if entity_id is None else str(entity_id),
        }
        if reason is not None:
            extra["reason"] = reason.value
        return extra
