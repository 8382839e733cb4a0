"""View Response Adapter — DispatchResult → rendered page, redirect, or 404 for browsers.

Invariants:
    - NotFound always raises ResourceNotFoundError (boundary renders the 404 page)
    - ValidationFailed re-runs the prepare-form hook exactly once, then re-renders the form
    - Redirect targets are fixed per step:
        CREATE → Index (CreateSuccessTarget.INDEX) or Details of the new entity (DETAILS_OF_NEW)
        EDIT, CLONE → Details of the resulting entity
        DELETE → Index
    - Redirects use 303 so the browser follows with GET
    - build_view_router registers /create before /{entity_id} (path-order matters)
    - A DomainValidationError naming a field is shown on the form like any other
      field error; one without a field still goes to the boundary handler

Design Decisions:
    - One respond() per request with a match on the step: every render/redirect
      decision visible in one place
    - Generic crud/*.html templates driven by schema fields; resources only supply
      a title and optional form choices
    - Endpoint annotations use the runtime key_type / schema so FastAPI converts path ids
"""

import logging
from typing import Any, Awaitable

from fastapi import APIRouter, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from crudflow.core.dispatch_result import (
    DispatchResult, ModelState, NotFound, ValidationFailed,
)
from crudflow.core.domain_types import CrudAction, CrudStep, CreateSuccessTarget
from crudflow.core.errors import (
    DomainValidationError, ErrorContext, ResourceNotFoundError,
)
from crudflow.core.model_binding import bind_model
from crudflow.services.crud_dispatcher import CrudDispatcher

logger = logging.getLogger(__name__)

_CONFIRM_VIEWS = {
    CrudStep.DETAILS: "details",
    CrudStep.DELETE_CONFIRM: "delete",
    CrudStep.CLONE_CONFIRM: "clone",
}


class ViewResponseAdapter:
    """Packages dispatcher results as HTML responses for one resource."""

    def __init__(
        self,
        dispatcher: CrudDispatcher,
        templates: Jinja2Templates,
        schema: type[BaseModel],
        name: str,
        title: str,
        template_folder: str = "crud",
    ):
        self.dispatcher = dispatcher
        self.templates = templates
        self.schema = schema
        self.name = name
        self.title = title
        self.template_folder = template_folder
        self.fields = [f for f in schema.model_fields if f != "id"]

    async def respond(
        self, request: Request, step: CrudStep, result: DispatchResult,
        entity_id: Any = None,
    ) -> Response:
        if isinstance(result, NotFound):
            raise self._not_found(result)
        if isinstance(result, ValidationFailed):
            return await self._rerender(request, step, result.state, entity_id)

        match step:
            case CrudStep.LIST:
                return self._render(request, "index", models=result.value)
            case CrudStep.CREATE_FORM:
                return self._render_form(
                    request, "create", {}, {}, result.form_context,
                )
            case CrudStep.EDIT_FORM:
                return self._render_form(
                    request, "edit", result.value.model_dump(), {},
                    result.form_context, entity_id=result.value.id,
                )
            case CrudStep.DETAILS | CrudStep.DELETE_CONFIRM | CrudStep.CLONE_CONFIRM:
                return self._render(
                    request, _CONFIRM_VIEWS[step], model=result.value,
                )
            case CrudStep.CREATE:
                if (
                    self.dispatcher.config.create_success_target
                    is CreateSuccessTarget.DETAILS_OF_NEW
                ):
                    return self._redirect(request, "details", result.value.id)
                return self._redirect(request, "index")
            case CrudStep.EDIT | CrudStep.CLONE:
                return self._redirect(request, "details", result.value.id)
            case CrudStep.DELETE:
                return self._redirect(request, "index")
        raise ValueError(f"Unhandled step: {step}")

    async def submit(
        self, state: ModelState, pending: Awaitable[DispatchResult],
    ) -> DispatchResult:
        """Await a create/edit, folding field-level domain errors into the form state."""
        try:
            return await pending
        except DomainValidationError as exc:
            if exc.field is None:
                raise
            state.errors.setdefault(exc.field, []).append(exc.message)
            return ValidationFailed(state)

    async def _rerender(
        self, request: Request, step: CrudStep, state: ModelState,
        entity_id: Any,
    ) -> Response:
        """Failed submission: hook runs again with the invalid state, then redisplay."""
        form_context = await self.dispatcher.prepare_form(state)
        view = "create" if step is CrudStep.CREATE else "edit"
        logger.info(
            f"{self.title} {view} rejected: {sorted(state.errors)}",
            extra={"resource": self.name, "action": step.value},
        )
        return self._render_form(
            request, view, state.values, state.errors, form_context,
            entity_id=entity_id,
        )

    def _render_form(
        self, request: Request, view: str, values: dict, errors: dict,
        form_context: dict, entity_id: Any = None,
    ) -> Response:
        return self._render(
            request, view,
            values=values, errors=errors,
            choices=form_context.get("choices", {}),
            form_context=form_context, entity_id=entity_id,
        )

    def _render(self, request: Request, view: str, **context: Any) -> Response:
        return self.templates.TemplateResponse(
            request,
            f"{self.template_folder}/{view}.html",
            {
                "title": self.title,
                "route": self.name,
                "fields": self.fields,
                "enabled": {
                    a.value: self.dispatcher.is_enabled(a) for a in CrudAction
                },
                **context,
            },
        )

    def _redirect(
        self, request: Request, target: str, entity_id: Any = None,
    ) -> RedirectResponse:
        if entity_id is None:
            url = request.url_for(f"{self.name}.{target}")
        else:
            url = request.url_for(
                f"{self.name}.{target}", entity_id=str(entity_id),
            )
        return RedirectResponse(str(url), status_code=status.HTTP_303_SEE_OTHER)

    def _not_found(self, result: NotFound) -> ResourceNotFoundError:
        entity_id = None if result.entity_id is None else str(result.entity_id)
        return ResourceNotFoundError(
            self.title, entity_id,
            ErrorContext(
                resource=self.name, action=result.action.value,
                entity_id=entity_id,
                debug_info={"reason": result.reason.value},
            ),
        )


def build_view_router(
    dispatcher: CrudDispatcher,
    templates: Jinja2Templates,
    schema: type[BaseModel],
    *,
    name: str,
    prefix: str,
    title: str,
    key_type: type = int,
) -> APIRouter:
    """Register the browser CRUD routes for one resource.

    Route names are "<name>.<view>" (index, details, create, edit, delete, clone)
    so redirects and templates can use url_for.
    """
    router = APIRouter(
        prefix=prefix, tags=[name], include_in_schema=False,
        default_response_class=HTMLResponse,
    )
    adapter = ViewResponseAdapter(dispatcher, templates, schema, name, title)

    @router.get("", name=f"{name}.index")
    async def index(request: Request):
        return await adapter.respond(
            request, CrudStep.LIST, await dispatcher.list(),
        )

    @router.get("/create", name=f"{name}.create")
    async def create_form(request: Request):
        return await adapter.respond(
            request, CrudStep.CREATE_FORM, await dispatcher.create_form(),
        )

    @router.post("/create", name=f"{name}.create_submit")
    async def create_submit(request: Request):
        state = bind_model(schema, await request.form())
        return await adapter.respond(
            request, CrudStep.CREATE,
            await adapter.submit(state, dispatcher.create(state)),
        )

    @router.get("/{entity_id}", name=f"{name}.details")
    async def details(request: Request, entity_id: key_type):
        return await adapter.respond(
            request, CrudStep.DETAILS, await dispatcher.details(entity_id),
            entity_id,
        )

    @router.get("/{entity_id}/edit", name=f"{name}.edit")
    async def edit_form(request: Request, entity_id: key_type):
        return await adapter.respond(
            request, CrudStep.EDIT_FORM, await dispatcher.edit_form(entity_id),
            entity_id,
        )

    @router.post("/{entity_id}/edit", name=f"{name}.edit_submit")
    async def edit_submit(request: Request, entity_id: key_type):
        state = bind_model(schema, await request.form())
        return await adapter.respond(
            request, CrudStep.EDIT,
            await adapter.submit(state, dispatcher.edit(entity_id, state)),
            entity_id,
        )

    @router.get("/{entity_id}/delete", name=f"{name}.delete")
    async def delete_confirm(request: Request, entity_id: key_type):
        return await adapter.respond(
            request, CrudStep.DELETE_CONFIRM,
            await dispatcher.delete_confirm(entity_id), entity_id,
        )

    @router.post("/{entity_id}/delete", name=f"{name}.delete_submit")
    async def delete_submit(request: Request, entity_id: key_type):
        return await adapter.respond(
            request, CrudStep.DELETE, await dispatcher.delete(entity_id),
            entity_id,
        )

    @router.get("/{entity_id}/clone", name=f"{name}.clone")
    async def clone_confirm(request: Request, entity_id: key_type):
        return await adapter.respond(
            request, CrudStep.CLONE_CONFIRM,
            await dispatcher.clone_confirm(entity_id), entity_id,
        )

    @router.post("/{entity_id}/clone", name=f"{name}.clone_submit")
    async def clone_submit(request: Request, entity_id: key_type):
        return await adapter.respond(
            request, CrudStep.CLONE, await dispatcher.clone(entity_id),
            entity_id,
        )

    return router
