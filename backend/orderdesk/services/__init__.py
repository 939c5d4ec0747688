"""
Business logic services for the order desk.

This module contains the credential verifier, access guard, order workflow,
catalog, reporting, and member services. Each takes the shared
DatabaseConfig at construction.
"""

from .auth import AccessGuard, CredentialVerifier, hash_password, verify_password
from .catalog import CatalogService
from .members import MemberService
from .orders import OrderService
from .reports import ReportingService
from .exceptions import (
    OrderDeskError,
    ValidationError,
    AuthenticationError,
    MissingTokenError,
    InvalidTokenError,
    ForbiddenError,
    NotFoundError,
    NotFoundOrForbiddenError,
    InternalError,
)

__all__ = [
    'AccessGuard',
    'CredentialVerifier',
    'hash_password',
    'verify_password',
    'CatalogService',
    'MemberService',
    'OrderService',
    'ReportingService',
    'OrderDeskError',
    'ValidationError',
    'AuthenticationError',
    'MissingTokenError',
    'InvalidTokenError',
    'ForbiddenError',
    'NotFoundError',
    'NotFoundOrForbiddenError',
    'InternalError',
]
