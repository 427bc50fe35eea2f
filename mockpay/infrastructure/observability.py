# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time

from flask import Flask, g, request
from prometheus_client import Counter, Histogram

from mockpay.shared.config import load_config

REQUEST_LATENCY = Histogram(
    "mockpay_request_latency_seconds",
    "Request latency",
    labelnames=("endpoint",),
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)
REQUEST_COUNTER = Counter(
    "mockpay_requests_total",
    "Number of processed requests",
    labelnames=("endpoint", "status"),
)
PAYMENT_OUTCOMES = Counter(
    "mockpay_payment_outcomes_total",
    "Simulated gateway results",
    labelnames=("operation", "outcome"),
)
REFRESH_RESULTS = Counter(
    "mockpay_refresh_results_total",
    "Refresh token rotation attempts",
    labelnames=("result",),
)


def metrics_enabled() -> bool:
    return load_config().observability.metrics_enabled


def record_payment(operation: str, outcome: str) -> None:
    if metrics_enabled():
        PAYMENT_OUTCOMES.labels(operation=operation, outcome=outcome).inc()


def record_refresh(result: str) -> None:
    if metrics_enabled():
        REFRESH_RESULTS.labels(result=result).inc()


def configure_metrics(app: Flask) -> None:
    if not metrics_enabled():
        return

    @app.before_request
    def _start_timer() -> None:
        g.metrics_start = time.perf_counter()

    @app.after_request
    def _observe(response):
        # Route templates, not raw paths, keep label cardinality bounded.
        endpoint = request.url_rule.rule if request.url_rule else "unmatched"
        started = g.get("metrics_start")
        if started is not None:
            REQUEST_LATENCY.labels(endpoint=endpoint).observe(time.perf_counter() - started)
        REQUEST_COUNTER.labels(endpoint=endpoint, status=str(response.status_code)).inc()
        return response


__all__ = [
    "PAYMENT_OUTCOMES",
    "REFRESH_RESULTS",
    "REQUEST_COUNTER",
    "REQUEST_LATENCY",
    "configure_metrics",
    "metrics_enabled",
    "record_payment",
    "record_refresh",
]
