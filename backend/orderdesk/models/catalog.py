"""
Catalog Pydantic models for products and product categories.
"""

from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel

from .pagination import PaginationModel


class ProductModel(BaseModel):
    """A visible catalog product with its category."""
    product_id: int
    product_name: str
    price: Decimal
    picture: Optional[str] = None
    category_id: int
    category_name: str


class CategoryModel(BaseModel):
    category_id: int
    category_name: str


class ProductListModel(BaseModel):
    """Paginated product listing."""
    products: List[ProductModel]
    pagination: PaginationModel
