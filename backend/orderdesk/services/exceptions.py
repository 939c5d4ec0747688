"""
Error taxonomy for order desk services.

Each error carries the user-facing message and the HTTP status it maps to.
Messages are deliberately generic; details go to the server log only.
"""


class OrderDeskError(Exception):
    """Base exception for all expected service failures."""
    status_code = 500
    default_message = "Server error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(OrderDeskError):
    """Malformed or missing input."""
    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(OrderDeskError):
    """Unknown email or wrong password; the two are never distinguished."""
    status_code = 401
    default_message = "Invalid email or password"


class MissingTokenError(OrderDeskError):
    """No bearer token on a protected request."""
    status_code = 401
    default_message = "No authorization token provided"


class InvalidTokenError(OrderDeskError):
    """Token signature, expiry, or claims failed verification."""
    status_code = 403
    default_message = "Invalid or expired token"


class ForbiddenError(OrderDeskError):
    """Caller's role does not permit the operation."""
    status_code = 403
    default_message = "Access to this resource is not allowed"


class NotFoundError(OrderDeskError):
    status_code = 404
    default_message = "Not found"


class NotFoundOrForbiddenError(NotFoundError):
    """Record absent or not visible to the caller; reported as plain not-found."""
    default_message = "Order not found or access denied"


class InternalError(OrderDeskError):
    """Unexpected store or driver failure."""
    status_code = 500
    default_message = "Server error"
