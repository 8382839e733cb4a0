"""HTTP Middleware — HTTPS enforcement that leaves local development alone.

Invariants:
    - Requests already on https (directly or via X-Forwarded-Proto) pass through
    - Loopback clients pass through, so local development needs no certificates
    - Everything else is redirected to the https URL with 308 (method and body preserved)
"""

import ipaddress
import logging
from typing import Callable

from fastapi import Request, status
from fastapi.responses import RedirectResponse

logger = logging.getLogger(__name__)


async def require_secure_connection(request: Request, call_next: Callable):
    if _is_secure(request) or _is_local(request):
        return await call_next(request)
    target = request.url.replace(scheme="https")
    logger.info(
        f"Redirecting insecure request to {target}",
        extra={"path": request.url.path},
    )
    return RedirectResponse(
        str(target), status_code=status.HTTP_308_PERMANENT_REDIRECT,
    )


def _is_secure(request: Request) -> bool:
    forwarded = request.headers.get("x-forwarded-proto", "")
    return request.url.scheme == "https" or forwarded.lower() == "https"


def _is_local(request: Request) -> bool:
    host = request.client.host if request.client else ""
    if host == "localhost":
        return True
    try:
        return ipaddress.ip_address(host).is_loopback
    except ValueError:
        return False
