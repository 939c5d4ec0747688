"""Admin sales statistics route."""

from flask import Blueprint, jsonify

from .. import get_services
from ..auth import current_identity, require_auth

stats_bp = Blueprint('stats', __name__)


@stats_bp.route('/stats/sales')
@require_auth()
def sales_stats():
    result = get_services().reports.sales_stats(current_identity())
    return jsonify(result.model_dump(mode='json', by_alias=True))
