"""Order routes: list, detail, create, delete."""

from flask import Blueprint, jsonify, request

from .. import get_services
from ..auth import current_identity, require_auth
from ...models.pagination import PageRequest

orders_bp = Blueprint('orders', __name__)


@orders_bp.route('/orders', methods=['GET'])
@require_auth()
def list_orders():
    """Paginated orders; members see only their own."""
    page_request = PageRequest.from_args(request.args.get('page'), request.args.get('limit'))
    result = get_services().orders.list_orders(current_identity(), page_request)
    return jsonify(result.model_dump(mode='json', by_alias=True))


@orders_bp.route('/orders/<int:order_id>', methods=['GET'])
@require_auth()
def get_order(order_id):
    result = get_services().orders.get_order(current_identity(), order_id)
    return jsonify(result.model_dump(mode='json'))


@orders_bp.route('/orders', methods=['POST'])
@require_auth()
def create_order():
    """Create an order from ``{"products": [{"product_id", "quantity"}, ...]}``."""
    body = request.get_json(silent=True)
    products = body.get('products') if isinstance(body, dict) else None
    order_id = get_services().orders.create_order(current_identity(), products)

    return jsonify({
        'message': 'Order created successfully',
        'order_id': order_id,
    }), 201


@orders_bp.route('/orders/<int:order_id>', methods=['DELETE'])
@require_auth()
def delete_order(order_id):
    """Delete an order and its line items (admin only)."""
    get_services().orders.delete_order(current_identity(), order_id)
    return jsonify({'message': 'Order deleted successfully'})
