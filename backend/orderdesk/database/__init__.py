"""
Database package for the order desk.

This package provides the SQLAlchemy schema and the pooled database
configuration shared by every service.
"""

from .models import (
    Base,
    Member,
    ProductCategory,
    Product,
    Booking,
    BookingDetail,
    create_all_tables,
    drop_all_tables
)

from .config import (
    DatabaseConfig,
    initialize_database,
)

__all__ = [
    # Models
    'Base',
    'Member',
    'ProductCategory',
    'Product',
    'Booking',
    'BookingDetail',
    'create_all_tables',
    'drop_all_tables',

    # Configuration
    'DatabaseConfig',
    'initialize_database',
]
