"""Request correlation for quote API logs.

Clients may send ``X-Correlation-ID``; otherwise one is generated. The id is
bound for the duration of the request and returned on the response so a
quote can be matched to its log lines.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from campquote.utils.logging import clear_correlation_id, set_correlation_id

CORRELATION_ID_HEADER = "X-Correlation-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_ID_HEADER))
        try:
            response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[CORRELATION_ID_HEADER] = correlation_id
        return response
