"""HTTP middleware: response hardening and request body guards."""

from typing import Callable

from fastapi import Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.errors import error_response
from app.core.exceptions import ErrorCode

SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "no-referrer",
}

# Login, refresh and /me bodies carry tokens or personal data
NO_STORE_HEADERS = {
    "Cache-Control": "no-store",
    "Pragma": "no-cache",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses, and no-store to API responses."""

    def __init__(self, app, api_prefix: str = "/api/"):
        super().__init__(app)
        self.api_prefix = api_prefix

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        if request.url.path.startswith(self.api_prefix):
            response.headers.update(NO_STORE_HEADERS)
        return response


class RequestValidationMiddleware(BaseHTTPMiddleware):
    """
    Every endpoint takes a small JSON body or none at all, so anything
    larger than MAX_BODY_SIZE or not JSON is refused up front.
    """

    MAX_BODY_SIZE = 64 * 1024
    BODY_METHODS = ("POST", "PUT", "PATCH")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Advisory only: chunked bodies carry no Content-Length and are not checked
        declared = request.headers.get("content-length", "")
        if declared.isdigit() and int(declared) > self.MAX_BODY_SIZE:
            return error_response(
                status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                ErrorCode.VALIDATION_ERROR,
                "Request body too large",
            )

        content_type = request.headers.get("content-type")
        if (
            request.method in self.BODY_METHODS
            and content_type
            and not content_type.startswith("application/json")
        ):
            return error_response(
                status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
                ErrorCode.VALIDATION_ERROR,
                "Unsupported content type",
            )

        return await call_next(request)
