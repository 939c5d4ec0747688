"""Login route."""

from flask import Blueprint, jsonify, request

from .. import get_services

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/login', methods=['POST'])
def login():
    """Exchange email and password for a session token."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = {}
    result = get_services().credentials.login(body.get('email'), body.get('password'))

    return jsonify({
        'message': 'Login successful',
        'token': result.token,
        'user': result.user.model_dump(mode='json', exclude={'created_at'}),
    })
