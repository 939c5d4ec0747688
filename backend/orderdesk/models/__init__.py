"""
Order desk Pydantic models package.

This package contains the Pydantic v2 models used for request validation,
identity, and response serialization.
"""

# Enums
from .enums import Role

# Identity and members
from .member import (
    Identity,
    MemberModel,
    LoginResultModel,
)

# Pagination
from .pagination import (
    PageRequest,
    PaginationModel,
)

# Orders
from .order import (
    OrderItemInput,
    CreateOrderRequest,
    OrderSummaryModel,
    OrderLineModel,
    OrderDetailModel,
    OrderListModel,
)

# Catalog
from .catalog import (
    ProductModel,
    CategoryModel,
    ProductListModel,
)

# Reporting
from .stats import (
    OrderStatsModel,
    CategorySalesModel,
    TopProductModel,
    MemberSpendModel,
    SalesStatsModel,
)

__all__ = [
    # Enums
    "Role",

    # Members
    "Identity",
    "MemberModel",
    "LoginResultModel",

    # Pagination
    "PageRequest",
    "PaginationModel",

    # Orders
    "OrderItemInput",
    "CreateOrderRequest",
    "OrderSummaryModel",
    "OrderLineModel",
    "OrderDetailModel",
    "OrderListModel",

    # Catalog
    "ProductModel",
    "CategoryModel",
    "ProductListModel",

    # Reporting
    "OrderStatsModel",
    "CategorySalesModel",
    "TopProductModel",
    "MemberSpendModel",
    "SalesStatsModel",
]
