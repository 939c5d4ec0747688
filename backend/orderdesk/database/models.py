"""
SQLAlchemy database models for the order desk.

This module defines the relational schema the API reads and writes:
- Member: registered accounts with hashed credentials and a role
- ProductCategory: product classes used to group the catalog
- Product: sellable items with price and picture
- Booking: order headers owned by a single member
- BookingDetail: order line items, one per product, ordered by priority

Table names match the existing production schema (``product_class`` for
categories), so the models can be pointed at a live database unchanged.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import relationship
from datetime import datetime

# Create the declarative base for all models
Base = declarative_base()


class Member(Base):
    """
    Member model representing a person who can log in and place orders.

    The password column stores a bcrypt hash, never the plain password.
    Role is either ``ADMIN`` or ``USER``.
    """
    __tablename__ = 'member'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)  # bcrypt hash
    role = Column(String(16), nullable=False, default='USER')
    vip = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    bookings = relationship("Booking", back_populates="member", lazy="select")

    def __repr__(self):
        return f"<Member(id={self.id}, email='{self.email}', role='{self.role}')>"


class ProductCategory(Base):
    """Product class grouping products in the catalog."""
    __tablename__ = 'product_class'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    alive = Column(Boolean, nullable=False, default=True)
    disable = Column(Boolean, nullable=False, default=False)

    products = relationship("Product", back_populates="category", lazy="select")

    def __repr__(self):
        return f"<ProductCategory(id={self.id}, name='{self.name}')>"


class Product(Base):
    """
    Product model representing a sellable item.

    Only products that are alive and not disabled are visible in the public
    catalog; historical bookings may still reference retired products.
    """
    __tablename__ = 'product'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    picture = Column(String(512), nullable=True)
    product_class_id = Column(Integer, ForeignKey('product_class.id'), nullable=False, index=True)
    alive = Column(Boolean, nullable=False, default=True)
    disable = Column(Boolean, nullable=False, default=False)

    category = relationship("ProductCategory", back_populates="products", lazy="select")

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', price={self.price})>"


class Booking(Base):
    """
    Booking model representing an order header.

    A booking is always written together with at least one BookingDetail
    row, and both are deleted together.
    """
    __tablename__ = 'booking'

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(DateTime, nullable=False, default=datetime.now, index=True)
    member_id = Column(Integer, ForeignKey('member.id'), nullable=False, index=True)

    # Audit fields
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    created_by = Column(String(255), nullable=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_by = Column(String(255), nullable=True)

    member = relationship("Member", back_populates="bookings", lazy="select")
    details = relationship(
        "BookingDetail",
        back_populates="booking",
        order_by="BookingDetail.priority",
        lazy="select"
    )

    def __repr__(self):
        return f"<Booking(id={self.id}, member_id={self.member_id}, date={self.date})>"


class BookingDetail(Base):
    """
    BookingDetail model representing one line item of a booking.

    Priority is the 1-based position of the item in the submitted order and
    is unique within its booking.
    """
    __tablename__ = 'booking_detail'
    __table_args__ = (
        UniqueConstraint('booking_id', 'priority', name='uq_booking_detail_priority'),
        CheckConstraint('count >= 1', name='ck_booking_detail_count_positive'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(Integer, ForeignKey('booking.id'), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey('product.id'), nullable=False, index=True)
    count = Column(Integer, nullable=False)
    priority = Column(Integer, nullable=False)

    # Audit fields
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    created_by = Column(String(255), nullable=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_by = Column(String(255), nullable=True)

    booking = relationship("Booking", back_populates="details", lazy="select")
    product = relationship("Product", lazy="select")

    def __repr__(self):
        return f"<BookingDetail(id={self.id}, booking_id={self.booking_id}, product_id={self.product_id}, count={self.count})>"


# Composite index for the order listing sort (date desc, id desc)
Index('idx_booking_date_id', Booking.date, Booking.id)
Index('idx_product_catalog', Product.alive, Product.disable, Product.product_class_id)


def create_all_tables(engine):
    """
    Create all database tables using the provided SQLAlchemy engine.

    Args:
        engine: SQLAlchemy engine instance
    """
    Base.metadata.create_all(bind=engine)


def drop_all_tables(engine):
    """
    Drop all database tables using the provided SQLAlchemy engine.

    Args:
        engine: SQLAlchemy engine instance
    """
    Base.metadata.drop_all(bind=engine)


__all__ = [
    'Base',
    'Member',
    'ProductCategory',
    'Product',
    'Booking',
    'BookingDetail',
    'create_all_tables',
    'drop_all_tables'
]
