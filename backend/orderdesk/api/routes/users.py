"""Current member profile route."""

from flask import Blueprint, jsonify

from .. import get_services
from ..auth import current_identity, require_auth

users_bp = Blueprint('users', __name__)


@users_bp.route('/user/profile')
@require_auth()
def profile():
    user = get_services().members.get_profile(current_identity())
    return jsonify({'user': user.model_dump(mode='json')})
