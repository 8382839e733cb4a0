"""Domain Types — enums that name every CRUD action, step and outcome.

Invariants:
    - Every dispatchable step maps to exactly one CrudAction toggle
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - str Enums: serialize to JSON/log extras without custom encoders
    - CrudAction (what is toggled) kept separate from CrudStep (what is executed):
      a form GET and its POST share one toggle
"""

from enum import Enum
from typing import TypeVar


# ─── Generic Type Parameters ─────────────────────────────────────

KeyT = TypeVar("KeyT")
EntityT = TypeVar("EntityT")


# ─── Enums ───────────────────────────────────────────────────────

class CrudAction(str, Enum):
    """The six logical actions. Each has one enablement toggle."""
    LIST = "list"
    GET = "get"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    CLONE = "clone"


class CrudStep(str, Enum):
    """Concrete dispatcher steps (form display + submit per action)."""
    LIST = "list"
    DETAILS = "details"
    CREATE_FORM = "create_form"
    CREATE = "create"
    EDIT_FORM = "edit_form"
    EDIT = "edit"
    DELETE_CONFIRM = "delete_confirm"
    DELETE = "delete"
    CLONE_CONFIRM = "clone_confirm"
    CLONE = "clone"


# Step → gating toggle
STEP_ACTIONS: dict[CrudStep, CrudAction] = {
    CrudStep.LIST: CrudAction.LIST,
    CrudStep.DETAILS: CrudAction.GET,
    CrudStep.CREATE_FORM: CrudAction.CREATE,
    CrudStep.CREATE: CrudAction.CREATE,
    CrudStep.EDIT_FORM: CrudAction.UPDATE,
    CrudStep.EDIT: CrudAction.UPDATE,
    CrudStep.DELETE_CONFIRM: CrudAction.DELETE,
    CrudStep.DELETE: CrudAction.DELETE,
    CrudStep.CLONE_CONFIRM: CrudAction.CLONE,
    CrudStep.CLONE: CrudAction.CLONE,
}


class CreateSuccessTarget(str, Enum):
    """Where the browser flow goes after a successful create."""
    INDEX = "index"
    DETAILS_OF_NEW = "details_of_new"


class NotFoundReason(str, Enum):
    """Why a step classified as not-found. Logged only — HTTP behavior is identical."""
    ABSENT = "absent"
    DISABLED = "disabled"
