from __future__ import annotations

import time
from typing import Optional

from flask import Blueprint, Flask, Response, g, request
from prometheus_client import Counter, Histogram, generate_latest

metrics_blueprint = Blueprint("metrics_bp", __name__)

CONTENT_TYPE_LATEST = "text/plain; version=0.0.4; charset=utf-8"

HTTP_REQUESTS = Counter(
    "musiclib_http_requests_total",
    "Total number of HTTP requests handled by the API.",
    ["method", "endpoint", "status"],
)
HTTP_REQUEST_LATENCY = Histogram(
    "musiclib_http_request_seconds",
    "Time spent handling HTTP requests.",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10, 30, float("inf")),
)
AI_REQUESTS = Counter(
    "musiclib_ai_requests_total",
    "Calls forwarded to the AI service, by operation and outcome.",
    ["operation", "outcome"],
)
AI_REQUEST_LATENCY = Histogram(
    "musiclib_ai_request_seconds",
    "Round-trip time of calls to the AI service.",
    ["operation"],
    buckets=(0.1, 0.5, 1, 2, 5, 10, 20, 30, float("inf")),
)
STATS_FALLBACKS = Counter(
    "musiclib_stats_fallback_total",
    "Dashboard statistics requests answered with zeroed defaults after a failure.",
)


def record_ai_request(operation: str, outcome: str, duration_seconds: Optional[float] = None) -> None:
    AI_REQUESTS.labels(operation=operation, outcome=outcome).inc()
    if duration_seconds is not None:
        AI_REQUEST_LATENCY.labels(operation=operation).observe(duration_seconds)


def record_stats_fallback() -> None:
    STATS_FALLBACKS.inc()


def init_request_metrics(app: Flask) -> None:
    """Count and time every request by its route endpoint."""

    @app.before_request
    def _start_timer():
        g.request_started_at = time.perf_counter()

    @app.after_request
    def _record_request(response):
        endpoint = request.endpoint or "unmatched"
        HTTP_REQUESTS.labels(
            method=request.method,
            endpoint=endpoint,
            status=str(response.status_code),
        ).inc()
        started = getattr(g, "request_started_at", None)
        if started is not None:
            HTTP_REQUEST_LATENCY.labels(method=request.method, endpoint=endpoint).observe(
                time.perf_counter() - started
            )
        return response


@metrics_blueprint.route("/metrics")
def metrics_endpoint() -> Response:
    return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)
