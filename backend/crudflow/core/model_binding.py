"""Model Binding — turns raw submitted values into a ModelState via pydantic.

Invariants:
    - Never raises on bad input: every pydantic error becomes a field error
    - Blank form strings are treated as missing (None), like an empty HTML input
    - Raw values are kept verbatim so a failed form re-renders what the user typed

Design Decisions:
    - pydantic model_validate as the single validation mechanism for both flows
      (ADR: the JSON API binds its raw bodies here too, after the toggle check)
    - Model-level errors (empty loc) collected under "__all__"
"""

from typing import Any, Mapping

from pydantic import BaseModel, ValidationError

from crudflow.core.dispatch_result import ModelState

FORM_ERRORS_KEY = "__all__"


def bind_model(schema: type[BaseModel], data: Mapping[str, Any]) -> ModelState:
    """Validate submitted data against schema. Returns a ModelState, valid or not."""
    raw = dict(data)
    try:
        entity = schema.model_validate(
            {key: _blank_to_none(value) for key, value in raw.items()},
        )
    except ValidationError as exc:
        return ModelState(values=raw, errors=collect_errors(exc))
    return ModelState(values=raw, entity=entity)


def state_from_entity(entity: BaseModel) -> ModelState:
    """Valid state for an entity loaded from persistence (edit form display)."""
    return ModelState.valid(entity, values=entity.model_dump())


def collect_errors(exc: ValidationError) -> dict[str, list[str]]:
    """Group pydantic errors by dotted field path."""
    errors: dict[str, list[str]] = {}
    for e in exc.errors():
        name = ".".join(str(loc) for loc in e["loc"]) or FORM_ERRORS_KEY
        errors.setdefault(name, []).append(e["msg"])
    return errors


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value
