"""
Shared fixtures for the order desk test suite.

Every test gets a fresh in-memory SQLite database created through the same
DatabaseConfig the application uses, seeded with members, categories and
products.
"""

from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

import bcrypt
import pytest

from orderdesk.database.config import DatabaseConfig
from orderdesk.database.models import Booking, BookingDetail, Member, Product, ProductCategory
from orderdesk.models import Identity, MemberModel, Role
from orderdesk.services import CredentialVerifier
from orderdesk.utils.config import AppConfig

TEST_SECRET = "test-secret"


def _hash(password):
    # Low cost factor keeps the suite fast
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")


@pytest.fixture
def db_config():
    """Create an in-memory database with all tables."""
    config = DatabaseConfig(database_url="sqlite:///:memory:")
    config.create_tables()
    yield config
    config.close()


@pytest.fixture
def seed(db_config):
    """Insert members, categories and products; return their IDs."""
    with db_config.get_session_context() as session:
        admin = Member(name="Admin", email="admin@example.com", password=_hash("admin123"), role="ADMIN")
        alice = Member(name="Alice", email="alice@example.com", password=_hash("alice123"), role="USER", vip=True)
        bob = Member(name="Bob", email="bob@example.com", password=_hash("bob123"), role="USER")

        drinks = ProductCategory(name="Drinks")
        snacks = ProductCategory(name="Snacks")
        retired = ProductCategory(name="Retired", alive=False)
        hidden = ProductCategory(name="Hidden", disable=True)
        session.add_all([admin, alice, bob, drinks, snacks, retired, hidden])
        session.flush()

        coffee = Product(name="Coffee", price=Decimal("3.50"), picture="coffee.png", product_class_id=drinks.id)
        tea = Product(name="Green Tea", price=Decimal("2.25"), product_class_id=drinks.id)
        chips = Product(name="Chips", price=Decimal("1.75"), product_class_id=snacks.id)
        cookie = Product(name="Cookie_Jar 100%", price=Decimal("5.00"), product_class_id=snacks.id)
        mug = Product(name="Old Mug", price=Decimal("8.00"), product_class_id=retired.id, alive=False)
        cocoa = Product(name="Cocoa", price=Decimal("2.75"), product_class_id=drinks.id, disable=True)
        session.add_all([coffee, tea, chips, cookie, mug, cocoa])
        session.flush()

        return SimpleNamespace(
            admin=admin.id,
            alice=alice.id,
            bob=bob.id,
            drinks=drinks.id,
            snacks=snacks.id,
            retired=retired.id,
            hidden=hidden.id,
            coffee=coffee.id,
            tea=tea.id,
            chips=chips.id,
            cookie=cookie.id,
            mug=mug.id,
            cocoa=cocoa.id,
        )


@pytest.fixture
def admin_identity(seed):
    return Identity(id=seed.admin, email="admin@example.com", name="Admin", role=Role.ADMIN)


@pytest.fixture
def alice_identity(seed):
    return Identity(id=seed.alice, email="alice@example.com", name="Alice", role=Role.USER)


@pytest.fixture
def bob_identity(seed):
    return Identity(id=seed.bob, email="bob@example.com", name="Bob", role=Role.USER)


@pytest.fixture
def add_booking(db_config):
    """Insert a booking directly with a fixed date and (product_id, count) lines."""
    def _add(member_id, date, lines):
        with db_config.get_session_context() as session:
            booking = Booking(date=date, member_id=member_id, created_at=date, updated_at=date)
            session.add(booking)
            session.flush()
            for priority, (product_id, count) in enumerate(lines, start=1):
                session.add(BookingDetail(
                    booking_id=booking.id,
                    product_id=product_id,
                    count=count,
                    priority=priority,
                ))
            return booking.id
    return _add


@pytest.fixture
def count_rows(db_config):
    """Return (bookings, booking_details) row counts."""
    def _count():
        with db_config.get_session_context() as session:
            return session.query(Booking).count(), session.query(BookingDetail).count()
    return _count


@pytest.fixture
def app_config():
    return AppConfig(jwt_secret=TEST_SECRET, log_level="WARNING")


@pytest.fixture
def app(app_config, db_config, seed):
    from orderdesk.api import create_app

    app = create_app(app_config, db_config=db_config)
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_header(db_config):
    """Build an Authorization header for an identity."""
    verifier = CredentialVerifier(db_config, TEST_SECRET)

    def _header(identity):
        member = MemberModel(id=identity.id, name=identity.name, email=identity.email, role=identity.role)
        return {"Authorization": f"Bearer {verifier.issue_token(member)}"}
    return _header


@pytest.fixture
def dates():
    return SimpleNamespace(
        early=datetime(2024, 1, 10, 9, 0),
        middle=datetime(2024, 2, 15, 12, 30),
        late=datetime(2024, 3, 20, 18, 45),
    )
