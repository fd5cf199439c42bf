"""Middleware: security headers and artifact caching headers."""

from collections.abc import Mapping

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

# The preview server only hands out JSON, never documents or scripts.
ARTIFACT_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Set *headers* on every response unless the route already chose a value."""

    def __init__(
        self, app: ASGIApp, headers: Mapping[str, str] = ARTIFACT_SECURITY_HEADERS
    ) -> None:
        super().__init__(app)
        self.headers = dict(headers)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        for name, value in self.headers.items():
            response.headers.setdefault(name, value)
        return response


class ArtifactCacheMiddleware(BaseHTTPMiddleware):
    """Mark JSON artifacts ``no-cache`` so a rebuild shows up on next load."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        if request.url.path.endswith(".json"):
            response.headers["Cache-Control"] = "no-cache"
        return response
