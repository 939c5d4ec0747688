"""
Enums for the order desk.

This module contains the enumeration types used for consistent validation
and dispatch across services.
"""

from enum import Enum


class Role(str, Enum):
    """Member role controlling order visibility and admin-only operations."""
    ADMIN = "ADMIN"
    USER = "USER"
