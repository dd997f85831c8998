"""
HTTP middleware for the Casa Nala app.

- RequestIDMiddleware: tags each request with an X-Request-ID
- AdminCookieGateMiddleware: sends requests for /admin pages without an auth
  cookie to the login page
"""

import logging
import uuid
from urllib.parse import urlencode

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from . import config
from .logging_config import request_id_var

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds a unique request ID to each request.
    The ID is available in request.state.request_id and returned in X-Request-ID header.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = request_id
        return response


def is_admin_path(path: str) -> bool:
    if path.startswith(API_PREFIX + "/"):
        path = path[len(API_PREFIX):]
    return path == "/admin" or path.startswith("/admin/")


class AdminCookieGateMiddleware(BaseHTTPMiddleware):
    """
    Redirect /admin and /admin/* to /login?redirectedFrom=<path> when the
    auth cookie is missing.

    Only presence of the cookie is checked here. Whether the session is valid
    and which role it has is decided by RoleGuard on each route.
    """

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if is_admin_path(path) and not request.cookies.get(config.AUTH_COOKIE_NAME):
            logger.debug("No auth cookie for %s, redirecting to login", path)
            return RedirectResponse(
                url="/login?" + urlencode({"redirectedFrom": path}),
                status_code=302,
            )
        return await call_next(request)
