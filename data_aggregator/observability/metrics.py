"""Prometheus metrics & middleware for the aggregator service.

Collects per-endpoint request count and latency plus decoded item counts,
and exposes them on /metrics for Prometheus.
"""
from __future__ import annotations

from typing import Iterable

from fastapi import APIRouter, Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)
import time

from data_aggregator.services.items import DataItem, IntItem

REQUEST_COUNT_NAME = "data_aggregator_request_total"
REQUEST_LATENCY_NAME = "data_aggregator_request_duration_seconds"
REQUEST_ERROR_COUNT_NAME = "data_aggregator_request_errors_total"
ITEM_COUNT_NAME = "data_aggregator_items_total"

# -----------------------------------------------------------------------------
# Metric objects
# -----------------------------------------------------------------------------
# Process-global and thread-safe.
REQUEST_COUNT = Counter(
    name=REQUEST_COUNT_NAME,
    documentation="Total HTTP requests",
    labelnames=["path", "method", "status"],
)

REQUEST_LATENCY = Histogram(
    name=REQUEST_LATENCY_NAME,
    documentation="Request latency in seconds",
    labelnames=["path", "method"],
)

REQUEST_ERROR_COUNT = Counter(
    name=REQUEST_ERROR_COUNT_NAME,
    documentation="Total HTTP error responses (status >= 400)",
    labelnames=["path", "method", "status"],
)

# ITEM_COUNT: decoded data items, labeled "int" or "text"
ITEM_COUNT = Counter(
    name=ITEM_COUNT_NAME,
    documentation="Data items received in valid requests",
    labelnames=["kind"],
)


def count_items(items: Iterable[DataItem]) -> None:
    ints = texts = 0
    for item in items:
        if isinstance(item, IntItem):
            ints += 1
        else:
            texts += 1
    ITEM_COUNT.labels("int").inc(ints)
    ITEM_COUNT.labels("text").inc(texts)

# -----------------------------------------------------------------------------
# ASGI middleware
# -----------------------------------------------------------------------------
# Wraps every HTTP request: counts it by route template, method and status,
# and observes its latency when the response starts.
class MetricsMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        # Only instrument HTTP requests (not websockets, lifespan, etc.)
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        req = Request(scope, receive)
        started_at = time.perf_counter()

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                status_code = message["status"]
                # Route template when matched, raw path otherwise (e.g. 404s)
                route = scope.get("route")
                if route and hasattr(route, "path"):
                    path_template = route.path
                else:
                    path_template = scope.get("path", "")
                REQUEST_COUNT.labels(path_template, req.method, status_code).inc()
                if int(status_code) >= 400:
                    REQUEST_ERROR_COUNT.labels(path_template, req.method, status_code).inc()
                REQUEST_LATENCY.labels(path_template, req.method).observe(time.perf_counter() - started_at)
            await send(message)

        await self.app(scope, receive, send_wrapper)

# -----------------------------------------------------------------------------
# /metrics endpoint
# -----------------------------------------------------------------------------
metrics_router = APIRouter()

@metrics_router.get("/metrics")
async def metrics():
    # Plaintext exposition format for Prometheus scraping
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
