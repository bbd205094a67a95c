# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import atexit

from flask import Flask

from sessionauth.infrastructure.container import Container
from sessionauth.interfaces.http.sessions import configure_sessions
from sessionauth.shared.config import AppConfig
from sessionauth.shared.logging import logger, setup_logging
from sessionauth.shared.middleware.error_handler import configure_error_handling
from sessionauth.shared.middleware.request_logger import configure_request_logging


def configure_security_headers(app: Flask, config: AppConfig) -> None:
    # after_request hooks run in reverse order: register before the session
    # hook so responses it replaces still get these headers.
    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cache-Control", "no-store")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains",
            )

        return resp


def create_app(container: Container | None = None, *, start_sweeper: bool = True) -> Flask:
    container = container or Container()
    config = container.config

    setup_logging(debug_mode=config.debug_logging)
    container.database.init_schema()

    app = Flask(__name__)
    app.extensions["sessionauth"] = container

    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_security_headers(app, config)
    configure_request_logging(app, debug_mode=config.debug_logging)
    configure_sessions(app, container.session_manager, config)

    app.register_blueprint(container.auth_controller.as_blueprint())

    if start_sweeper and config.session.sweep_interval > 0:
        container.session_sweeper.start()
        atexit.register(container.session_sweeper.stop)

    logger.info(f"Flask app initialized (session backend={config.session.backend})")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
