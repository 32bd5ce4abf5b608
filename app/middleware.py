# =============================================================================
# app/middleware.py - HTTP Middleware
# =============================================================================
# Cross-cutting HTTP behaviour applied to every request:
# - CORS: every origin is allowed, credentials included
# - Security headers: a fixed hardening preset on every response
# - Unhandled errors: turned into the generic 500 inside the stack, so the
#   error response still gets CORS and security headers
#
# The CORS policy is deliberately permissive: browsers from any origin may
# call the API with cookies. Tighten it here if the API ever serves
# cookie-authenticated browser sessions from untrusted sites.
# =============================================================================

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import Response

from app.exceptions import unhandled_exception_handler

SECURITY_HEADERS: dict[str, str] = {
    "Content-Security-Policy": (
        "default-src 'self';base-uri 'self';font-src 'self' https: data:;"
        "form-action 'self';frame-ancestors 'self';img-src 'self' data:;"
        "object-src 'none';script-src 'self';script-src-attr 'none';"
        "style-src 'self' https: 'unsafe-inline';upgrade-insecure-requests"
    ),
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add the hardening headers to every response without overriding a handler's own."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        if "x-powered-by" in response.headers:
            del response.headers["x-powered-by"]

        return response


class CatchAllErrorsMiddleware(BaseHTTPMiddleware):
    """Catch unexpected exceptions and make them the generic 500 JSON."""

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return await unhandled_exception_handler(request, exc)


def install_middleware(app: FastAPI) -> None:
    """
    Register the middleware stack on the application.

    Starlette runs the last-added middleware first, so CORS wraps the
    security headers, which wrap the error catcher. CORS also answers
    preflight requests.
    """
    app.add_middleware(CatchAllErrorsMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

    # Reflect whatever Origin the browser sends; "*" can't be combined with credentials
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=".*",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
