# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from mockpay.infrastructure.container import Container, container
from mockpay.infrastructure.db import init_db
from mockpay.infrastructure.observability import configure_metrics
from mockpay.shared.logging import logger, setup_logging
from mockpay.shared.middleware.error_handler import configure_error_handling
from mockpay.shared.middleware.request_logger import configure_request_logging


def create_app(app_container: Container | None = None) -> Flask:
    deps = app_container or container
    config = deps.config
    setup_logging(
        config.log_level,
        debug_mode=config.debug_logging,
        log_file=str(config.log_file) if config.log_file else None,
        rotation=config.log_rotation,
        retention=config.log_retention,
    )
    if not config.database.is_memory():
        init_db()

    app = Flask(__name__)
    configure_error_handling(app)
    configure_request_logging(app)
    configure_metrics(app)

    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": config.security.allowed_origins}}
    }
    CORS(app, **cors_kwargs)
    app.register_blueprint(deps.misc_controller.as_blueprint())
    app.register_blueprint(deps.auth_controller.as_blueprint())
    app.register_blueprint(deps.payment_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cache-Control", "no-store")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )

        return resp

    logger.info(f"Flask app initialized env={config.app_env}")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
