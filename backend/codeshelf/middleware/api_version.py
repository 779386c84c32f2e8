"""
CodeShelf Backend — API Version Header Middleware
===================================================

What:  Adds `X-API-Version` to every response under /api.
How:   The list endpoint has one wire shape ({snippets, count}); clients
       read this header to know which contract version they are talking to.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from codeshelf import API_VERSION


class APIVersionMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        if request.url.path.startswith("/api"):
            response.headers["X-API-Version"] = API_VERSION
        return response
