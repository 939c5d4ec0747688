"""
Order desk: order management API for members, products and bookings.

Serves a browser admin console with:
1. Login and bearer-token session handling
2. Booking creation, listing, detail and deletion with role-gated visibility
3. A public product catalog
4. Admin sales reporting
"""

__version__ = "0.1.0"
