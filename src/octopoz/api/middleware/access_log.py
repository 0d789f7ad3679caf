from __future__ import annotations

import logging
import time

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger("octopoz.api.access")

HTTP_REQUESTS_TOTAL = Counter(
    "octopoz_http_requests_total",
    "Total number of HTTP requests served by the engine API.",
    ["method", "route", "status_code"],
)
HTTP_REQUEST_SECONDS = Histogram(
    "octopoz_http_request_duration_seconds",
    "HTTP request duration in seconds.",
    ["method", "route"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)


def route_label(request: Request) -> str:
    # Route templates keep tenant and order ids out of label values.
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        status_code = 500
        failed = False
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        except Exception:
            failed = True
            logger.exception("request_error", extra=self._fields(request, status_code, started))
            raise
        finally:
            route = route_label(request)
            elapsed = time.perf_counter() - started
            HTTP_REQUESTS_TOTAL.labels(
                method=request.method, route=route, status_code=str(status_code)
            ).inc()
            HTTP_REQUEST_SECONDS.labels(method=request.method, route=route).observe(elapsed)
            if not failed:
                logger.info("request_complete", extra=self._fields(request, status_code, started))

    @staticmethod
    def _fields(request: Request, status_code: int, started: float) -> dict:
        return {
            "method": request.method,
            "path": request.url.path,
            "status_code": status_code,
            "tenant_id": request.path_params.get("tenant_id"),
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        }
