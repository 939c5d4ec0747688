"""Health check route backed by the database pool."""

from flask import Blueprint, jsonify

from .. import get_services

health_bp = Blueprint('health', __name__)


@health_bp.route('/health')
def health():
    """Report database connectivity and pool usage."""
    db = get_services().db
    healthy = db.test_connection()

    return jsonify({
        'status': 'ok' if healthy else 'unavailable',
        'database': db.get_connection_info(),
    }), 200 if healthy else 503
