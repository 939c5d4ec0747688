"""
Admin-only sales reporting.

Aggregates are computed on demand with GROUP BY queries; nothing is stored.
The role check happens before any query is issued.
"""

import logging
from decimal import Decimal

from sqlalchemy import distinct, func, select
from sqlalchemy.exc import SQLAlchemyError

from ..database.config import DatabaseConfig
from ..database.models import Booking, BookingDetail, Member, Product, ProductCategory
from ..models.enums import Role
from ..models.member import Identity
from ..models.stats import (
    CategorySalesModel,
    MemberSpendModel,
    OrderStatsModel,
    SalesStatsModel,
    TopProductModel,
)
from .auth import AccessGuard
from .exceptions import InternalError

logger = logging.getLogger(__name__)

TOP_N = 10


class ReportingService:
    """Sales rollups for the admin dashboard."""

    def __init__(self, db_config: DatabaseConfig, top_n: int = TOP_N):
        self.db = db_config
        self.top_n = top_n

    def sales_stats(self, identity: Identity) -> SalesStatsModel:
        """
        Compute order totals, category sales, top products, and top members.

        Raises:
            ForbiddenError: If the caller is not an admin
            InternalError: If any aggregate query fails
        """
        AccessGuard.require_role(identity, Role.ADMIN)

        line_total = BookingDetail.count * Product.price

        order_stats_query = (
            select(
                func.count(distinct(Booking.id)).label("total_orders"),
                func.coalesce(func.sum(BookingDetail.count), 0).label("total_items"),
                func.coalesce(func.sum(line_total), 0).label("total_sales"),
            )
            .select_from(Booking)
            .join(BookingDetail, Booking.id == BookingDetail.booking_id)
            .join(Product, BookingDetail.product_id == Product.id)
        )

        category_total = func.sum(line_total).label("total_sales")
        category_query = (
            select(
                ProductCategory.name.label("category_name"),
                func.count(distinct(Product.id)).label("product_count"),
                func.sum(BookingDetail.count).label("total_sold"),
                category_total,
            )
            .select_from(ProductCategory)
            .join(Product, ProductCategory.id == Product.product_class_id)
            .join(BookingDetail, Product.id == BookingDetail.product_id)
            .where(ProductCategory.alive.is_(True))
            .group_by(ProductCategory.id, ProductCategory.name)
            .order_by(category_total.desc())
        )

        product_sold = func.sum(BookingDetail.count).label("total_sold")
        top_products_query = (
            select(
                Product.id.label("product_id"),
                Product.name.label("product_name"),
                ProductCategory.name.label("category_name"),
                Product.price.label("unit_price"),
                product_sold,
                func.sum(line_total).label("total_sales"),
                func.count(distinct(Booking.id)).label("order_count"),
            )
            .select_from(Product)
            .join(ProductCategory, Product.product_class_id == ProductCategory.id)
            .join(BookingDetail, Product.id == BookingDetail.product_id)
            .join(Booking, BookingDetail.booking_id == Booking.id)
            .group_by(Product.id, Product.name, ProductCategory.name, Product.price)
            .order_by(product_sold.desc(), Product.id.asc())
            .limit(self.top_n)
        )

        member_amount = func.sum(line_total).label("total_amount")
        member_query = (
            select(
                Member.id.label("member_id"),
                Member.name.label("member_name"),
                Member.email.label("member_email"),
                Member.vip.label("member_vip"),
                func.count(distinct(Booking.id)).label("order_count"),
                func.sum(BookingDetail.count).label("total_items"),
                member_amount,
            )
            .select_from(Member)
            .join(Booking, Member.id == Booking.member_id)
            .join(BookingDetail, Booking.id == BookingDetail.booking_id)
            .join(Product, BookingDetail.product_id == Product.id)
            .group_by(Member.id, Member.name, Member.email, Member.vip)
            .order_by(member_amount.desc(), Member.id.asc())
            .limit(self.top_n)
        )

        try:
            with self.db.get_session_context() as session:
                totals = session.execute(order_stats_query).one()
                categories = session.execute(category_query).all()
                products = session.execute(top_products_query).all()
                members = session.execute(member_query).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to compute sales statistics: {e}")
            raise InternalError() from e

        return SalesStatsModel(
            order_stats=OrderStatsModel(
                total_orders=int(totals.total_orders),
                total_items=int(totals.total_items),
                total_sales=Decimal(str(totals.total_sales)),
            ),
            category_sales=[CategorySalesModel(**row._mapping) for row in categories],
            top_products=[TopProductModel(**row._mapping) for row in products],
            member_stats=[MemberSpendModel(**row._mapping) for row in members],
        )
