from __future__ import annotations

import pytest
from flask import Flask

from mockpay.app import create_app
from mockpay.infrastructure.container import Container
from mockpay.infrastructure.db import ENGINE, Base, SessionLocal
from mockpay.infrastructure.db.models import User


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=ENGINE)
    Base.metadata.create_all(bind=ENGINE)
    yield
    Base.metadata.drop_all(bind=ENGINE)


@pytest.fixture()
def app() -> Flask:
    return create_app(Container())


def test_register_login_refresh_charge_flow(app: Flask) -> None:
    credentials = {"email": "a@x.com", "password": "Secret123!"}

    with app.test_client() as client:
        register = client.post("/api/auth/register", json=credentials)
        assert register.status_code == 200

        duplicate = client.post("/api/auth/register", json=credentials)
        assert duplicate.status_code == 400

        wrong = client.post(
            "/api/auth/login", json={"email": "a@x.com", "password": "Secret123?"}
        )
        assert wrong.status_code == 401

        login = client.post("/api/auth/login", json=credentials)
        assert login.status_code == 200
        first = login.get_json()

        refresh = client.post("/api/auth/refresh", json={"refreshToken": first["refreshToken"]})
        assert refresh.status_code == 200
        second = refresh.get_json()
        assert second["refreshToken"] != first["refreshToken"]

        replay = client.post("/api/auth/refresh", json={"refreshToken": first["refreshToken"]})
        assert replay.status_code == 401

        unauthorized = client.post("/api/payment/charge", json={"amount": 10})
        assert unauthorized.status_code == 401

        charge = client.post(
            "/api/payment/charge",
            json={"amount": 10, "cardNumber": "4111111111111111"},
            headers={"Authorization": f"Bearer {second['accessToken']}"},
        )
        assert charge.status_code in (200, 400)
        assert charge.get_json()["status"] in ("success", "failed")

        metrics = client.get("/metrics").get_data(as_text=True)
        assert 'mockpay_refresh_results_total{result="rotated"}' in metrics
        assert 'mockpay_requests_total{endpoint="/api/auth/login",status="200"}' in metrics

    session = SessionLocal()
    try:
        users = session.query(User).all()
        assert len(users) == 1
        assert users[0].refresh_token == second["refreshToken"]
        assert users[0].password_hash != credentials["password"]
    finally:
        session.close()


def test_health_and_security_headers(app: Flask) -> None:
    with app.test_client() as client:
        response = client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["status"] == "healthy"
    assert payload["database"] == "ok"
    assert response.headers["X-Request-ID"] == "req-123"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["Cache-Control"] == "no-store"


def test_unknown_route_is_404(app: Flask) -> None:
    with app.test_client() as client:
        response = client.get("/api/nothing-here")

    assert response.status_code == 404
