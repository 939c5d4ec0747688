"""
Sales reporting Pydantic models.

Every figure here is a point-in-time aggregate over bookings, their line
items, and current product prices.
"""

from decimal import Decimal
from typing import List
from pydantic import BaseModel, Field, ConfigDict


class OrderStatsModel(BaseModel):
    """Totals across all bookings."""
    total_orders: int = 0
    total_items: int = 0
    total_sales: Decimal = Decimal("0")


class CategorySalesModel(BaseModel):
    category_name: str
    product_count: int
    total_sold: int
    total_sales: Decimal


class TopProductModel(BaseModel):
    product_id: int
    product_name: str
    category_name: str
    unit_price: Decimal
    total_sold: int
    total_sales: Decimal
    order_count: int


class MemberSpendModel(BaseModel):
    member_id: int
    member_name: str
    member_email: str
    member_vip: bool
    order_count: int
    total_items: int
    total_amount: Decimal


class SalesStatsModel(BaseModel):
    """Admin sales dashboard payload."""
    model_config = ConfigDict(populate_by_name=True)

    order_stats: OrderStatsModel = Field(..., alias="orderStats")
    category_sales: List[CategorySalesModel] = Field(default_factory=list, alias="categorySales")
    top_products: List[TopProductModel] = Field(default_factory=list, alias="topProducts")
    member_stats: List[MemberSpendModel] = Field(default_factory=list, alias="memberStats")
