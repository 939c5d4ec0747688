"""
Order workflow service for bookings and their line items.

This module implements order listing, retrieval, creation, and deletion with:
- Role-based visibility: members only see their own bookings, admins see all
- Atomic header/detail writes inside a single database transaction
- Totals computed from line items and current product prices at read time

A booking goes NonExistent -> Created -> Deleted. There are no intermediate
states, and line items are never modified after creation.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError

from ..database.config import DatabaseConfig
from ..database.models import Booking, BookingDetail, Member, Product, ProductCategory
from ..models.enums import Role
from ..models.member import Identity
from ..models.order import (
    CreateOrderRequest,
    OrderDetailModel,
    OrderLineModel,
    OrderListModel,
    OrderSummaryModel,
)
from ..models.pagination import PageRequest, PaginationModel
from .auth import AccessGuard
from .exceptions import (
    InternalError,
    NotFoundError,
    NotFoundOrForbiddenError,
    ValidationError,
)

logger = logging.getLogger(__name__)

INVALID_PRODUCT_LIST = "Please provide a valid product list"


def _format_date(value: datetime) -> str:
    return value.strftime("%Y-%m-%d")


class OrderService:
    """
    Order workflow engine over the booking and booking_detail tables.

    Every multi-statement write runs in one session, which holds a single
    pooled connection and commits or rolls back as a unit.
    """

    def __init__(self, db_config: DatabaseConfig):
        """
        Initialize the order service.

        Args:
            db_config: Database configuration owning the connection pool
        """
        self.db = db_config
        logger.info("OrderService initialized")

    def list_orders(self, identity: Identity, page_request: Optional[PageRequest] = None) -> OrderListModel:
        """
        List bookings visible to the caller, newest first.

        Non-admin callers only see their own bookings. Rows are sorted by
        booking date descending with booking id descending as tie-break.

        Args:
            identity: Authenticated caller
            page_request: Page window (defaults to page 1, limit 10)

        Returns:
            OrderListModel with the page of orders and pagination totals
        """
        page_request = page_request or PageRequest()

        total_items = (
            select(func.coalesce(func.sum(BookingDetail.count), 0))
            .where(BookingDetail.booking_id == Booking.id)
            .correlate(Booking)
            .scalar_subquery()
        )
        total_amount = (
            select(func.coalesce(func.sum(BookingDetail.count * Product.price), 0))
            .select_from(BookingDetail)
            .join(Product, BookingDetail.product_id == Product.id)
            .where(BookingDetail.booking_id == Booking.id)
            .correlate(Booking)
            .scalar_subquery()
        )

        query = (
            select(
                Booking.id.label("booking_id"),
                Booking.date.label("booking_date"),
                Member.name.label("member_name"),
                Member.email.label("member_email"),
                Member.vip.label("member_vip"),
                total_items.label("total_items"),
                total_amount.label("total_amount"),
            )
            .join(Member, Booking.member_id == Member.id)
        )
        count_query = select(func.count(Booking.id))

        if not identity.is_admin:
            query = query.where(Booking.member_id == identity.id)
            count_query = count_query.where(Booking.member_id == identity.id)

        query = (
            query.order_by(Booking.date.desc(), Booking.id.desc())
            .limit(page_request.limit)
            .offset(page_request.offset)
        )

        try:
            with self.db.get_session_context() as session:
                rows = session.execute(query).all()
                total = session.execute(count_query).scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Failed to list orders for member {identity.id}: {e}")
            raise InternalError() from e

        orders = [
            OrderSummaryModel(
                booking_id=row.booking_id,
                booking_date=_format_date(row.booking_date),
                member_name=row.member_name,
                member_email=row.member_email,
                member_vip=row.member_vip,
                total_items=int(row.total_items),
                total_amount=Decimal(str(row.total_amount)),
            )
            for row in rows
        ]
        return OrderListModel(orders=orders, pagination=PaginationModel.build(total, page_request))

    def get_order(self, identity: Identity, order_id: int) -> OrderDetailModel:
        """
        Fetch one booking with its line items ordered by priority.

        Args:
            identity: Authenticated caller
            order_id: Booking ID

        Returns:
            OrderDetailModel with line items, subtotals, and totals

        Raises:
            NotFoundOrForbiddenError: If the booking does not exist or belongs
                to another member and the caller is not an admin
        """
        header_query = (
            select(Booking, Member)
            .join(Member, Booking.member_id == Member.id)
            .where(Booking.id == order_id)
        )
        if not identity.is_admin:
            header_query = header_query.where(Member.id == identity.id)

        lines_query = (
            select(
                BookingDetail.id.label("detail_id"),
                BookingDetail.count.label("quantity"),
                BookingDetail.priority,
                Product.id.label("product_id"),
                Product.name.label("product_name"),
                Product.price.label("unit_price"),
                Product.picture,
                ProductCategory.name.label("product_category"),
            )
            .join(Product, BookingDetail.product_id == Product.id)
            .join(ProductCategory, Product.product_class_id == ProductCategory.id)
            .where(BookingDetail.booking_id == order_id)
            .order_by(BookingDetail.priority.asc())
        )

        try:
            with self.db.get_session_context() as session:
                header = session.execute(header_query).first()
                lines = session.execute(lines_query).all() if header is not None else []
        except SQLAlchemyError as e:
            logger.error(f"Failed to load order {order_id}: {e}")
            raise InternalError() from e

        if header is None:
            raise NotFoundOrForbiddenError()
        booking, member = header

        details = [
            OrderLineModel(
                detail_id=line.detail_id,
                quantity=line.quantity,
                priority=line.priority,
                product_id=line.product_id,
                product_name=line.product_name,
                unit_price=line.unit_price,
                picture=line.picture,
                subtotal=line.unit_price * line.quantity,
                product_category=line.product_category,
            )
            for line in lines
        ]

        return OrderDetailModel(
            booking_id=booking.id,
            booking_date=_format_date(booking.date),
            created_at=booking.created_at,
            created_by=booking.created_by,
            updated_at=booking.updated_at,
            updated_by=booking.updated_by,
            member_id=member.id,
            member_name=member.name,
            member_email=member.email,
            member_vip=member.vip,
            details=details,
            total_amount=sum((line.subtotal for line in details), Decimal("0")),
            total_items=sum(line.quantity for line in details),
        )

    def create_order(self, identity: Identity, products: Any) -> int:
        """
        Create a booking and its line items atomically.

        Line items are written in submission order with priority 1..N. If any
        insert fails (for example a product that does not exist) the whole
        transaction is rolled back and no rows persist.

        Args:
            identity: Authenticated caller, recorded as owner and auditor
            products: Sequence of ``{product_id, quantity}`` mappings

        Returns:
            The new booking ID

        Raises:
            ValidationError: If the product list is missing, empty, or malformed
            InternalError: If the transactional write fails
        """
        items = self._parse_items(products)
        now = datetime.now()

        try:
            with self.db.get_session_context() as session:
                booking = Booking(
                    date=now,
                    member_id=identity.id,
                    created_at=now,
                    created_by=identity.email,
                    updated_at=now,
                    updated_by=identity.email,
                )
                session.add(booking)
                session.flush()

                for priority, item in enumerate(items, start=1):
                    session.add(BookingDetail(
                        booking_id=booking.id,
                        product_id=item.product_id,
                        count=item.quantity,
                        priority=priority,
                        created_at=now,
                        created_by=identity.email,
                        updated_at=now,
                        updated_by=identity.email,
                    ))
                    # Flush per line so a failing row aborts before later ones
                    session.flush()

                order_id = booking.id
        except SQLAlchemyError as e:
            logger.error(f"Failed to create order for member {identity.id}: {e}")
            raise InternalError() from e

        logger.info(f"Order {order_id} created by member {identity.id} with {len(items)} items")
        return order_id

    def delete_order(self, identity: Identity, order_id: int) -> None:
        """
        Delete a booking and all of its line items in one transaction.

        Deletion is admin-only; owning the booking does not grant it.

        Args:
            identity: Authenticated caller
            order_id: Booking ID

        Raises:
            NotFoundError: If the booking does not exist
            ForbiddenError: If the caller is not an admin
            InternalError: If the transactional delete fails
        """
        try:
            with self.db.get_session_context() as session:
                exists = session.execute(
                    select(Booking.id).where(Booking.id == order_id)
                ).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up order {order_id}: {e}")
            raise InternalError() from e

        if exists is None:
            raise NotFoundError("Order not found")
        AccessGuard.require_role(identity, Role.ADMIN, "Not allowed to delete orders")

        try:
            with self.db.get_session_context() as session:
                session.execute(delete(BookingDetail).where(BookingDetail.booking_id == order_id))
                session.execute(delete(Booking).where(Booking.id == order_id))
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete order {order_id}: {e}")
            raise InternalError() from e

        logger.info(f"Order {order_id} deleted by member {identity.id}")

    @staticmethod
    def _parse_items(products: Any) -> List:
        """Validate the raw product list before any transaction is opened."""
        if not isinstance(products, Sequence) or isinstance(products, (str, bytes)):
            raise ValidationError(INVALID_PRODUCT_LIST)
        try:
            request = CreateOrderRequest(products=list(products))
        except PydanticValidationError as e:
            logger.debug(f"Rejected order payload: {e}")
            raise ValidationError(INVALID_PRODUCT_LIST) from e
        return request.products
