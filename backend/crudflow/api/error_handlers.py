"""Error Handlers — global exception handlers translating classifications to HTTP.

Invariants:
    - CrudflowError → its http_status with the structured envelope (404 for not-found/disabled)
    - RequestValidationError → 400 with field-level error details
    - HTTPException (routing 404, 405, ...) → same envelope; 401/403 reported as 404
      when settings.mask_access_errors is on
    - Exception (catch-all) → 500; exception text included only in development
    - Browser requests (Accept: text/html, outside /api/) get the HTML error page

Design Decisions:
    - Layered handlers: domain (CrudflowError), validation (Pydantic), HTTP, catch-all
    - Extracted from main.py (ADR: import fan-out < 10)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, Response
from fastapi.exceptions import RequestValidationError
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from crudflow.config import Settings
from crudflow.core.errors import CrudflowError, ErrorSeverity

logger = logging.getLogger(__name__)

_MASKED_STATUSES = (
    status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN,
)


def register_error_handlers(
    app: FastAPI, templates: Jinja2Templates, settings: Settings,
) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_crudflow_error_handler(app, templates)
    _register_validation_error_handler(app, templates)
    _register_http_error_handler(app, templates, settings)
    _register_generic_error_handler(app, templates, settings)


def _register_crudflow_error_handler(
    app: FastAPI, templates: Jinja2Templates,
) -> None:
    """Register domain/infrastructure error handler."""

    @app.exception_handler(CrudflowError)
    async def crudflow_error_handler(request: Request, exc: CrudflowError):
        """Handle all crudflow domain/infrastructure errors."""
        level = logging.ERROR if exc.http_status >= 500 else logging.INFO
        logger.log(
            level,
            f"CrudflowError: {exc.message}",
            extra={
                "error_code": exc.code, "path": request.url.path,
                "reason": (exc.context.debug_info or {}).get("reason"),
            },
        )
        return _respond(
            request, templates, exc.http_status, exc.to_response(),
        )


def _register_validation_error_handler(
    app: FastAPI, templates: Jinja2Templates,
) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return _respond(
            request, templates, status.HTTP_400_BAD_REQUEST,
            _build_validation_error_response(exc),
        )


def _register_http_error_handler(
    app: FastAPI, templates: Jinja2Templates, settings: Settings,
) -> None:
    """Register handler for framework HTTP errors (unknown routes, wrong methods)."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException,
    ):
        status_code = exc.status_code
        message = str(exc.detail)
        if settings.mask_access_errors and status_code in _MASKED_STATUSES:
            status_code = status.HTTP_404_NOT_FOUND
            message = "This resource could not be found"
        content = {
            "error": {
                "code": "HTTP_ERROR",
                "message": message,
                "category": "http",
                "severity": ErrorSeverity.ERROR.value,
            },
        }
        return _respond(
            request, templates, status_code, content,
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(
    app: FastAPI, templates: Jinja2Templates, settings: Settings,
) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — internal details only in development."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path},
        )
        error = {
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred",
            "category": "internal",
            "severity": ErrorSeverity.CRITICAL.value,
        }
        if settings.is_development:
            error["detail"] = f"{type(exc).__name__}: {exc}"
        return _respond(
            request, templates, status.HTTP_500_INTERNAL_SERVER_ERROR,
            {"error": error},
        )


def _wants_html(request: Request) -> bool:
    """Browser navigation outside the JSON API."""
    if request.url.path.startswith("/api/"):
        return False
    return "text/html" in request.headers.get("accept", "")


def _respond(
    request: Request, templates: Jinja2Templates, status_code: int,
    content: dict, headers: dict | None = None,
) -> Response:
    if _wants_html(request):
        return templates.TemplateResponse(
            request, "errors/error.html",
            {"status_code": status_code, "error": content["error"]},
            status_code=status_code, headers=headers,
        )
    return JSONResponse(
        status_code=status_code, content=content, headers=headers,
    )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
