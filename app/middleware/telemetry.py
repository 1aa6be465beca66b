"""Telemetry middleware for request instrumentation."""

from __future__ import annotations

import time
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.telemetry import REQUESTS_IN_PROGRESS, observe_request

_SKIPPED_PATHS = frozenset({"/metrics"})


class TelemetryMiddleware(BaseHTTPMiddleware):
    """Collect request counts, latency and in-flight requests for Prometheus."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.url.path in _SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        method = request.method
        in_progress = REQUESTS_IN_PROGRESS.labels(method=method)
        in_progress.inc()

        try:
            response = await call_next(request)
        except Exception:  # pragma: no cover
            observe_request(method, self._resolve_route(request), 500, time.perf_counter() - start_time)
            raise
        finally:
            in_progress.dec()

        # The route is only resolved once the router has matched the request.
        observe_request(method, self._resolve_route(request), response.status_code, time.perf_counter() - start_time)
        return response

    @staticmethod
    def _resolve_route(request: Request) -> str:
        """Return best-effort route pattern for metrics labels."""

        scope_route: Any = request.scope.get("route")
        if scope_route is not None:
            path = getattr(scope_route, "path", None)
            if path:
                return path

        return request.url.path
