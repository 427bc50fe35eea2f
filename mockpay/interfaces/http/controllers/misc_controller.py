# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from flask import Blueprint, Response, jsonify
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from mockpay.infrastructure.health import check_database
from mockpay.infrastructure.observability import metrics_enabled
from mockpay.shared.config import load_config
from mockpay.shared.logging import logger


class MiscController:
    def __init__(self, *, database_check: Callable[[], bool] = check_database) -> None:
        self._database_check = database_check

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/health", view_func=self.health, methods=["GET"])
        bp.add_url_rule("/metrics", view_func=self.metrics, methods=["GET"])
        return bp

    def health(self):
        status: dict[str, object] = {
            "status": "healthy",
            "service": load_config().observability.service_name,
            "timestamp": datetime.now(UTC).isoformat(),
        }
        try:
            self._database_check()
            status["database"] = "ok"
        except Exception as exc:
            logger.error(f"health: database check failed ({type(exc).__name__})")
            status["status"] = "unhealthy"
            status["database"] = "error"
            return jsonify(status), 503
        return jsonify(status), 200

    def metrics(self):
        if not metrics_enabled():
            return jsonify({"error": "metrics_disabled"}), 404
        return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)
