"""Request logging middleware.

One line per request on logger "ot.request", with the short request id
also returned to the client as X-Request-ID:

    INFO    [GET] /api/v1/bounties/stats → 200 (4ms) req_1a2b3c4d5e6f
    INFO    [GET] /api/v1/home/stats?refresh=true → 200 (212ms) req_...
    WARNING [GET] /api/v1/rfps/stats → 500 (9ms) req_...

5xx responses log at WARNING (the handler has already logged the cause).
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("ot.request")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = f"req_{uuid.uuid4().hex[:12]}"
        request.state.request_id = request_id

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        path = request.url.path
        if request.url.query:
            path = f"{path}?{request.url.query}"
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "[%s] %s → %d (%.0fms) %s",
            request.method,
            path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
