"""Prometheus metrics middleware."""
import time

from fastapi import FastAPI, Request
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

# Metrics
http_requests_total = Counter(
    "worktrack_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "worktrack_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
)

workflow_operations_total = Counter(
    "worktrack_workflow_operations_total",
    "Task workflow operations by outcome",
    ["operation", "outcome"],
)


def record_workflow_outcome(operation: str, outcome: str) -> None:
    """Count one workflow operation. Outcome is ``ok`` or a failure kind."""
    workflow_operations_total.labels(operation=operation, outcome=outcome).inc()


def _endpoint_label(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def setup_metrics(app: FastAPI) -> None:
    """Setup Prometheus metrics endpoint and request instrumentation."""

    @app.middleware("http")
    async def collect_request_metrics(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        endpoint = _endpoint_label(request)
        http_requests_total.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=str(response.status_code),
        ).inc()
        http_request_duration_seconds.labels(method=request.method, endpoint=endpoint).observe(
            time.perf_counter() - started
        )
        return response

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        """Prometheus metrics endpoint."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
