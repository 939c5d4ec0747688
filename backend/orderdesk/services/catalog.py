"""
Read-only catalog queries over products and product categories.

Only records that are alive and not disabled are visible. Optional filters
are composed as bound clauses; no value is ever interpolated into SQL.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from ..database.config import DatabaseConfig
from ..database.models import Product, ProductCategory
from ..models.catalog import CategoryModel, ProductListModel, ProductModel
from ..models.pagination import PageRequest, PaginationModel
from .exceptions import InternalError

logger = logging.getLogger(__name__)

DEFAULT_PRODUCT_PAGE_SIZE = 20


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class CatalogService:
    """Public product and category listings."""

    def __init__(self, db_config: DatabaseConfig):
        self.db = db_config

    def list_products(
        self,
        page_request: Optional[PageRequest] = None,
        category_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> ProductListModel:
        """
        List visible products sorted by name.

        Args:
            page_request: Page window (defaults to page 1, limit 20)
            category_id: Exact category match, if given
            search: Case-insensitive substring of the product name, if given

        Returns:
            ProductListModel with the page of products and pagination totals
        """
        page_request = page_request or PageRequest(limit=DEFAULT_PRODUCT_PAGE_SIZE)

        filters = [Product.alive.is_(True), Product.disable.is_(False)]
        if category_id is not None:
            filters.append(Product.product_class_id == category_id)
        if search:
            pattern = f"%{_escape_like(search.lower())}%"
            filters.append(func.lower(Product.name).like(pattern, escape="\\"))

        query = (
            select(
                Product.id.label("product_id"),
                Product.name.label("product_name"),
                Product.price,
                Product.picture,
                ProductCategory.id.label("category_id"),
                ProductCategory.name.label("category_name"),
            )
            .join(ProductCategory, Product.product_class_id == ProductCategory.id)
            .where(*filters)
            .order_by(Product.name.asc())
            .limit(page_request.limit)
            .offset(page_request.offset)
        )
        count_query = select(func.count(Product.id)).where(*filters)

        try:
            with self.db.get_session_context() as session:
                rows = session.execute(query).all()
                total = session.execute(count_query).scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Failed to list products: {e}")
            raise InternalError() from e

        products = [ProductModel(**row._mapping) for row in rows]
        return ProductListModel(products=products, pagination=PaginationModel.build(total, page_request))

    def list_categories(self) -> List[CategoryModel]:
        """List visible categories sorted by name."""
        query = (
            select(
                ProductCategory.id.label("category_id"),
                ProductCategory.name.label("category_name"),
            )
            .where(ProductCategory.alive.is_(True), ProductCategory.disable.is_(False))
            .order_by(ProductCategory.name.asc())
        )

        try:
            with self.db.get_session_context() as session:
                rows = session.execute(query).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to list categories: {e}")
            raise InternalError() from e

        return [CategoryModel(**row._mapping) for row in rows]
