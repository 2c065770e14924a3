"""API routes - all prefixed with /api."""

from flask import Blueprint

from . import auth, client_errors, health, settings, users

api_bp = Blueprint("api", __name__, url_prefix="/api")
api_bp.register_blueprint(health.bp)
api_bp.register_blueprint(auth.bp)
api_bp.register_blueprint(users.bp)
api_bp.register_blueprint(settings.bp)
api_bp.register_blueprint(client_errors.bp)

__all__ = ["api_bp"]
