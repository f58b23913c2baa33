import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

TIMING_HEADER = "X-Process-Time-Ms"


class HTTPLogMiddleware(BaseHTTPMiddleware):
    """Debug log of every request with its status and duration.

    The duration is also returned to the caller in ``X-Process-Time-Ms`` so
    slow schedule computations can be spotted from the client side.
    """

    def __init__(self, app, logger_name: str = "schedule_api.http"):
        super().__init__(app)
        self._logger = logging.getLogger(logger_name)

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        client = request.client.host if request.client else "-"
        self._logger.debug("-> %s %s client=%s", request.method, target, client)
        try:
            response: Response = await call_next(request)
        except Exception as e:
            self._logger.warning(
                "!! %s %s failed after %.1fms: %r",
                request.method, target, (time.perf_counter() - started) * 1000, e,
            )
            raise
        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[TIMING_HEADER] = f"{elapsed_ms:.1f}"
        self._logger.debug("<- %s %s %d in %.1fms", request.method, target, response.status_code, elapsed_ms)
        return response
