from __future__ import annotations

from flask import Blueprint, current_app, jsonify


stats_bp = Blueprint('stats_bp', __name__, url_prefix='/api/v1/stats')


@stats_bp.route('', methods=['GET'])
def dashboard_stats():
    return jsonify(current_app.extensions['stats_service'].get_dashboard_stats())
