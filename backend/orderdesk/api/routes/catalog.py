"""Public catalog routes."""

from flask import Blueprint, jsonify, request

from .. import get_services
from ...models.pagination import PageRequest
from ...services.catalog import DEFAULT_PRODUCT_PAGE_SIZE

catalog_bp = Blueprint('catalog', __name__)


@catalog_bp.route('/products')
def list_products():
    """Visible products, filterable by category and name search."""
    page_request = PageRequest.from_args(
        request.args.get('page'),
        request.args.get('limit'),
        default_limit=DEFAULT_PRODUCT_PAGE_SIZE,
    )
    result = get_services().catalog.list_products(
        page_request,
        category_id=request.args.get('category', type=int),
        search=request.args.get('search') or None,
    )
    return jsonify(result.model_dump(mode='json', by_alias=True))


@catalog_bp.route('/categories')
def list_categories():
    categories = get_services().catalog.list_categories()
    return jsonify({'categories': [category.model_dump(mode='json') for category in categories]})
