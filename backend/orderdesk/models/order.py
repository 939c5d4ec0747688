"""
Order-related Pydantic models for the order desk.

This module contains the order creation request and the listing and
detail views of bookings with their computed totals.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from .pagination import PaginationModel


class OrderItemInput(BaseModel):
    """One requested line item: a product and a positive quantity."""
    model_config = ConfigDict(extra="ignore")

    # Booleans, floats and numeric strings are rejected
    product_id: int = Field(..., strict=True, description="Referenced product ID")
    quantity: int = Field(..., strict=True, ge=1, description="Units ordered")


class CreateOrderRequest(BaseModel):
    """Order creation payload; line items keep their submitted order."""
    products: List[OrderItemInput] = Field(..., min_length=1)


class OrderSummaryModel(BaseModel):
    """
    One row of the order listing.

    Totals are aggregated over the booking's line items at query time.
    """
    booking_id: int
    booking_date: str = Field(..., description="Booking date as YYYY-MM-DD")
    member_name: str
    member_email: str
    member_vip: bool
    total_items: int = Field(default=0, ge=0)
    total_amount: Decimal = Field(default=Decimal("0"))


class OrderLineModel(BaseModel):
    """A booking line item joined with its product and category."""
    detail_id: int
    quantity: int = Field(..., ge=1)
    priority: int = Field(..., ge=1)
    product_id: int
    product_name: str
    unit_price: Decimal
    picture: Optional[str] = None
    subtotal: Decimal
    product_category: str


class OrderDetailModel(BaseModel):
    """A booking header with its ordered line items and computed totals."""
    booking_id: int
    booking_date: str
    created_at: datetime
    created_by: Optional[str] = None
    updated_at: datetime
    updated_by: Optional[str] = None
    member_id: int
    member_name: str
    member_email: str
    member_vip: bool
    details: List[OrderLineModel] = Field(default_factory=list)
    total_amount: Decimal = Field(default=Decimal("0"))
    total_items: int = 0


class OrderListModel(BaseModel):
    """Paginated order listing."""
    orders: List[OrderSummaryModel]
    pagination: PaginationModel
