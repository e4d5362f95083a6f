from __future__ import annotations

from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

health_bp = Blueprint("health_bp", __name__)


@health_bp.route("/health")
def health():
    timestamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    return jsonify({"status": "ok", "timestamp": timestamp})


@health_bp.route("/readyz")
def readyz():
    status = 200
    checks = {}

    try:
        current_app.extensions["database"].ping()
        checks["database"] = "ok"
    except Exception as exc:
        current_app.logger.warning("Readiness check failed: %s", exc)
        status = 503
        checks["database"] = f"error: {exc}"

    overall = "ready" if status == 200 else "degraded"
    return jsonify({"status": overall, "checks": checks}), status
