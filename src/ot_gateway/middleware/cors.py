"""CORS middleware whose preflight answer is always an empty 200.

Starlette's CORSMiddleware answers a disallowed preflight with
400 "Disallowed CORS ..." and an allowed one with the body "OK". Browsers
only look at the Access-Control-* headers, so here every preflight gets
status 200, no body, and whichever CORS headers the origin earned: a
disallowed origin simply receives no Access-Control-Allow-Origin.
"""

from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import Response

_BODY_HEADERS = ("content-length", "content-type")


class PreflightCORSMiddleware(CORSMiddleware):
    def preflight_response(self, request_headers: Headers) -> Response:
        checked = super().preflight_response(request_headers)
        headers = {
            key: value
            for key, value in checked.headers.items()
            if key not in _BODY_HEADERS
        }
        return Response(status_code=200, headers=headers)
