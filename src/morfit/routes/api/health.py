from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    config = current_app.extensions["morfit.config"]
    return jsonify(
        {
            "success": True,
            "message": f"{config.app_name} is running",
            "environment": config.env,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    )
