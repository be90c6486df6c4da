"""Security headers middleware.

Learn: every response gets nosniff, DENY framing and a referrer policy;
HSTS is added on HTTPS connections only.

Responses under /api/ are data, never documents: uploaded images come
back with whatever content type the client claimed, so an SVG with a
<script> inside would otherwise run on this origin. A locked-down
Content-Security-Policy with `sandbox` makes the browser treat such a
response as an inert, opaque-origin resource. /docs is left alone since
Swagger UI needs scripts.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

API_PREFIX = "/api/"
API_CSP = "default-src 'none'; frame-ancestors 'none'; sandbox"
HSTS = "max-age=31536000; includeSubDomains"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response: Response = await call_next(request)
        headers = response.headers
        headers["X-Content-Type-Options"] = "nosniff"
        headers["X-Frame-Options"] = "DENY"
        headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if request.url.path.startswith(API_PREFIX):
            headers.setdefault("Content-Security-Policy", API_CSP)
        if request.url.scheme == "https":
            headers["Strict-Transport-Security"] = HSTS
        return response
