# catalog_admin/middleware/metrics.py
import logging
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from catalog_admin.core.config import settings

logger = logging.getLogger(__name__)


def empty_metrics() -> dict:
    return {"requests": 0, "total_response_ms": 0.0}


class MetricsMiddleware(BaseHTTPMiddleware):
    """
    Counts requests and accumulated response time in app.state.metrics,
    and logs requests slower than SLOW_REQUEST_MS.
    NOTE: app.state may not exist yet while the middleware stack builds, so the
    container is created lazily on the first request.
    """

    async def dispatch(self, request: Request, call_next):
        metrics = getattr(request.app.state, "metrics", None)
        if metrics is None:
            metrics = request.app.state.metrics = empty_metrics()

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000.0

        # single-process, requests are serialized
        metrics["requests"] += 1
        metrics["total_response_ms"] += elapsed_ms

        if elapsed_ms > settings.SLOW_REQUEST_MS:
            logger.warning(
                "Slow request %s %s -> %s in %.1f ms",
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
            )

        return response
