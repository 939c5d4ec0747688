"""Request authentication decorators for protected routes."""

from functools import wraps
from typing import Optional

from flask import g, request

from ..models.enums import Role
from ..models.member import Identity
from . import get_services


def require_auth(role: Optional[Role] = None, message: Optional[str] = None):
    """Validate the bearer token and expose the caller as ``g.identity``.

    Args:
        role: Role the caller must hold, if any
        message: Forbidden message used when the role check fails
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            guard = get_services().guard
            identity = guard.authenticate(request.headers.get("Authorization"))
            if role is not None:
                guard.require_role(identity, role, message)
            g.identity = identity
            return fn(*args, **kwargs)
        return wrapper
    return decorator


def current_identity() -> Identity:
    return g.identity
