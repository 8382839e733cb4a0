"""Resource Response Adapter — DispatchResult → payload for the JSON API. No views, no redirects.

Invariants:
    - Ok → the entity, the collection, or None (delete)
    - NotFound → ResourceNotFoundError; the boundary handler turns it into 404
    - ValidationFailed → RequestValidationError, same 400 envelope FastAPI uses for bad bodies
    - PUT /{id} goes through the dispatcher's EDIT step, so the path id overwrites body.id
    - Invalid bodies reach unwrap() as ValidationFailed and leave as RequestValidationError
    - Status codes are declared on the routes (200, 201, 204); unwrap() knows none of them

Design Decisions:
    - Same dispatcher and toggles as the browser flow: behavior can only differ in packaging
    - Bodies arrive as raw JSON and are bound with bind_model() after routing, so a
      disabled Create/Update answers 404 whatever the body holds; the schema still
      documents the request body through openapi_extra
"""

from typing import Any

from fastapi import APIRouter, Body, Response, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel

from crudflow.core.dispatch_result import (
    DispatchResult, NotFound, ValidationFailed,
)
from crudflow.core.errors import ErrorContext, ResourceNotFoundError
from crudflow.core.model_binding import bind_model
from crudflow.services.crud_dispatcher import CrudDispatcher


class ResourceResponseAdapter:
    """Unwraps dispatcher results into response payloads for one resource."""

    def __init__(self, name: str, title: str):
        self.name = name
        self.title = title

    def unwrap(self, result: DispatchResult) -> Any:
        if isinstance(result, NotFound):
            entity_id = None if result.entity_id is None else str(result.entity_id)
            raise ResourceNotFoundError(
                self.title, entity_id,
                ErrorContext(
                    resource=self.name, action=result.action.value,
                    entity_id=entity_id,
                    debug_info={"reason": result.reason.value},
                ),
            )
        if isinstance(result, ValidationFailed):
            raise RequestValidationError([
                {"loc": ("body", field), "msg": msg, "type": "value_error"}
                for field, messages in result.state.errors.items()
                for msg in messages
            ])
        return result.value


def build_resource_router(
    dispatcher: CrudDispatcher,
    schema: type[BaseModel],
    *,
    name: str,
    prefix: str,
    title: str,
    key_type: type = int,
) -> APIRouter:
    """Register GET/POST/PUT/DELETE (+ POST /{id}/clone) JSON routes for one resource."""
    router = APIRouter(prefix=prefix, tags=[name])
    adapter = ResourceResponseAdapter(name, title)
    body_docs = {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": schema.model_json_schema()}},
        },
    }

    @router.get("", response_model=list[schema], name=f"api.{name}.list")
    async def list_entities():
        return adapter.unwrap(await dispatcher.list())

    @router.get("/{entity_id}", response_model=schema, name=f"api.{name}.get")
    async def get_entity(entity_id: key_type):
        return adapter.unwrap(await dispatcher.details(entity_id))

    @router.post(
        "", response_model=schema, status_code=status.HTTP_201_CREATED,
        name=f"api.{name}.create", openapi_extra=body_docs,
    )
    async def create_entity(body: dict[str, Any] = Body(...)):
        state = bind_model(schema, body)
        return adapter.unwrap(await dispatcher.create(state))

    @router.put(
        "/{entity_id}", response_model=schema, name=f"api.{name}.update",
        openapi_extra=body_docs,
    )
    async def update_entity(entity_id: key_type, body: dict[str, Any] = Body(...)):
        state = bind_model(schema, body)
        return adapter.unwrap(await dispatcher.edit(entity_id, state))

    @router.delete(
        "/{entity_id}", status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response, name=f"api.{name}.delete",
    )
    async def delete_entity(entity_id: key_type):
        adapter.unwrap(await dispatcher.delete(entity_id))
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @router.post(
        "/{entity_id}/clone", response_model=schema,
        status_code=status.HTTP_201_CREATED, name=f"api.{name}.clone",
    )
    async def clone_entity(entity_id: key_type):
        return adapter.unwrap(await dispatcher.clone(entity_id))

    return router
