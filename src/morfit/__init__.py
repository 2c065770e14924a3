import logging
import uuid

from flask import Flask, g, request
from werkzeug.exceptions import HTTPException

from . import db, responses
from .config import Config
from .errors import AppError
from .routes import api_bp
from .security import clear_context
from .security.permissions import allow_all, set_permission_checker
from .security.tokens import TokenService

log = logging.getLogger(__name__)


def create_app(config: Config | None = None):
    """
    Application factory.

    Args:
        config: Settings for this app. Defaults to Config.from_env().
    """
    config = config or Config.from_env()
    config.validate()

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if config.uses_dev_secret:
        log.warning("Signing tokens with the development JWT secret")

    app = Flask(__name__)
    app.extensions["morfit.config"] = config
    app.extensions["morfit.tokens"] = TokenService.from_config(config)
    set_permission_checker(allow_all, app)

    # Database lifecycle
    db.init_app(app)

    # Request context middleware
    @app.before_request
    def set_request_context():
        g.request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))

    @app.after_request
    def add_request_id_header(response):
        response.headers["X-Request-ID"] = g.get("request_id", "")
        return response

    app.teardown_request(clear_context)

    # Blueprints
    app.register_blueprint(api_bp)  # /api/*

    # Error handlers - every failure uses the JSON envelope
    @app.errorhandler(AppError)
    def app_error(e):
        if not e.is_operational:
            log.error(f"Non-operational error: {e.message}")
        elif e.status_code >= 500:
            log.error(f"{type(e).__name__}: {e.message}")
        return responses.from_exception(e)

    @app.errorhandler(404)
    def not_found(e):
        return responses.error("API endpoint not found", 404)

    @app.errorhandler(HTTPException)
    def http_error(e):
        return responses.error(e.name, e.code or 500)

    @app.errorhandler(Exception)
    def internal_error(e):
        log.exception("Unhandled error")
        return responses.error("Internal server error", 500)

    return app


__all__ = ["create_app", "Config"]
