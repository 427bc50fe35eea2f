from __future__ import annotations

from flask import Flask

from mockpay.interfaces.http.controllers.misc_controller import MiscController


def _failing_check() -> bool:
    raise ConnectionError("database unreachable")


def test_health_reports_unhealthy_database() -> None:
    app = Flask(__name__)
    app.register_blueprint(MiscController(database_check=_failing_check).as_blueprint())

    with app.test_client() as client:
        response = client.get("/health")

    assert response.status_code == 503
    payload = response.get_json()
    assert payload["status"] == "unhealthy"
    assert payload["database"] == "error"
    assert "timestamp" in payload


def test_health_ok() -> None:
    app = Flask(__name__)
    app.register_blueprint(MiscController(database_check=lambda: True).as_blueprint())

    with app.test_client() as client:
        response = client.get("/health")

    assert response.status_code == 200
    assert response.get_json()["status"] == "healthy"


def test_metrics_exposes_prometheus_text() -> None:
    app = Flask(__name__)
    app.register_blueprint(MiscController(database_check=lambda: True).as_blueprint())

    with app.test_client() as client:
        response = client.get("/metrics")

    assert response.status_code == 200
    assert response.mimetype == "text/plain"
    assert b"mockpay_payment_outcomes_total" in response.data
