from time import perf_counter

from fastapi import Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware

HTTP_REQUESTS_TOTAL = Counter(
    "quakewatch_http_requests_total",
    "Total HTTP requests.",
    ["method", "path", "status"],
)
HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "quakewatch_http_request_duration_seconds",
    "HTTP request latency in seconds.",
    ["method", "path"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)

DETECTION_RUNS_TOTAL = Counter(
    "quakewatch_detection_runs_total",
    "Detection runs by score cache outcome.",
    ["cache"],
)
READINGS_SCORED_TOTAL = Counter(
    "quakewatch_readings_scored_total",
    "Readings scored by the isolation forest, padding included.",
)
PADDED_ROWS_TOTAL = Counter(
    "quakewatch_padded_rows_total",
    "Synthetic filler rows appended to undersized batches.",
)
SEVERITY_ASSIGNED_TOTAL = Counter(
    "quakewatch_severity_assigned_total",
    "Severity tiers assigned to readings.",
    ["severity"],
)
ENSEMBLE_FIT_SECONDS = Histogram(
    "quakewatch_ensemble_fit_seconds",
    "Time spent normalizing, fitting and scoring one batch.",
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10),
)


class PrometheusMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = perf_counter()
        response = await call_next(request)
        duration = perf_counter() - start

        path = request.url.path
        if path == "/metrics":
            return response

        HTTP_REQUESTS_TOTAL.labels(
            method=request.method,
            path=path,
            status=str(response.status_code),
        ).inc()
        HTTP_REQUEST_DURATION_SECONDS.labels(
            method=request.method,
            path=path,
        ).observe(duration)
        return response


def metrics_response() -> Response:
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
