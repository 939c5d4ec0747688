"""
Test suite for credential verification and token guarding.
"""

import pytest
from datetime import datetime, timedelta, timezone

import jwt

from orderdesk.models import Identity, MemberModel, Role
from orderdesk.services import (
    AccessGuard,
    AuthenticationError,
    CredentialVerifier,
    ForbiddenError,
    InvalidTokenError,
    MissingTokenError,
    ValidationError,
)
from orderdesk.services.auth import TOKEN_ALGORITHM, hash_password, verify_password

from conftest import TEST_SECRET


@pytest.fixture
def verifier(db_config):
    return CredentialVerifier(db_config, TEST_SECRET)


@pytest.fixture
def guard():
    return AccessGuard(TEST_SECRET)


def _forge(claims, secret=TEST_SECRET):
    return jwt.encode(claims, secret, algorithm=TOKEN_ALGORITHM)


class TestPasswordHashing:
    """Test cases for bcrypt helpers."""

    def test_hash_and_verify(self):
        hashed = hash_password("s3cret")

        assert hashed != "s3cret"
        assert hashed.startswith("$2")
        assert verify_password("s3cret", hashed)
        assert not verify_password("wrong", hashed)

    def test_each_hash_is_salted(self):
        assert hash_password("same") != hash_password("same")

    def test_malformed_hash_never_matches(self):
        assert verify_password("anything", "not-a-bcrypt-hash") is False


class TestLogin:
    """Test cases for CredentialVerifier.login."""

    def test_successful_login_returns_token_and_member(self, verifier, guard, seed):
        result = verifier.login("alice@example.com", "alice123")

        assert result.user.id == seed.alice
        assert result.user.email == "alice@example.com"
        assert result.user.role is Role.USER
        assert result.user.vip is True

        identity = guard.decode_token(result.token)
        assert identity == Identity(id=seed.alice, email="alice@example.com", name="Alice", role=Role.USER)

    def test_token_expires_after_configured_lifetime(self, db_config, seed):
        verifier = CredentialVerifier(db_config, TEST_SECRET, token_ttl_seconds=120)

        token = verifier.login("admin@example.com", "admin123").token
        claims = jwt.decode(token, TEST_SECRET, algorithms=[TOKEN_ALGORITHM])

        assert claims["exp"] - claims["iat"] == 120
        assert claims["role"] == "ADMIN"

    @pytest.mark.parametrize("email,password", [
        ("", "alice123"),
        ("alice@example.com", ""),
        (None, None),
        ("alice@example.com", 12345),
        (["alice@example.com"], "alice123"),
        ({"email": "alice@example.com"}, "alice123"),
    ])
    def test_missing_or_malformed_fields(self, verifier, seed, email, password):
        with pytest.raises(ValidationError) as exc_info:
            verifier.login(email, password)

        assert exc_info.value.message == "Email and password are required"

    def test_wrong_password_and_unknown_email_are_indistinguishable(self, verifier, seed):
        with pytest.raises(AuthenticationError) as wrong_password:
            verifier.login("alice@example.com", "nope")
        with pytest.raises(AuthenticationError) as unknown_email:
            verifier.login("nobody@example.com", "alice123")

        assert wrong_password.value.message == unknown_email.value.message == "Invalid email or password"
        assert wrong_password.value.status_code == unknown_email.value.status_code == 401


class TestAccessGuard:
    """Test cases for bearer token validation."""

    def test_authenticate_valid_header(self, verifier, guard, seed):
        token = verifier.login("bob@example.com", "bob123").token

        identity = guard.authenticate(f"Bearer {token}")

        assert identity.id == seed.bob
        assert not identity.is_admin

    @pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer   ", "Token abc", "abc"])
    def test_missing_token(self, guard, header):
        with pytest.raises(MissingTokenError) as exc_info:
            guard.authenticate(header)

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "No authorization token provided"

    def test_expired_token(self, guard):
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = _forge({
            "id": 1, "email": "a@example.com", "name": "A", "role": "USER",
            "iat": past, "exp": past + timedelta(hours=1),
        })

        with pytest.raises(InvalidTokenError) as exc_info:
            guard.authenticate(f"Bearer {token}")

        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "Invalid or expired token"

    def test_wrong_signature(self, guard):
        token = _forge({
            "id": 1, "email": "a@example.com", "name": "A", "role": "ADMIN",
            "exp": datetime.now(timezone.utc) + timedelta(hours=1),
        }, secret="someone-else")

        with pytest.raises(InvalidTokenError):
            guard.authenticate(f"Bearer {token}")

    def test_token_without_expiry_is_rejected(self, guard):
        token = _forge({"id": 1, "email": "a@example.com", "name": "A", "role": "ADMIN"})

        with pytest.raises(InvalidTokenError):
            guard.decode_token(token)

    def test_unknown_role_claim_is_rejected(self, guard):
        token = _forge({
            "id": 1, "email": "a@example.com", "name": "A", "role": "ROOT",
            "exp": datetime.now(timezone.utc) + timedelta(hours=1),
        })

        with pytest.raises(InvalidTokenError):
            guard.decode_token(token)

    def test_garbage_token(self, guard):
        with pytest.raises(InvalidTokenError):
            guard.authenticate("Bearer not.a.jwt")

    def test_require_role(self, admin_identity, alice_identity):
        AccessGuard.require_role(admin_identity, Role.ADMIN)

        with pytest.raises(ForbiddenError) as exc_info:
            AccessGuard.require_role(alice_identity, Role.ADMIN, "Admins only")

        assert exc_info.value.message == "Admins only"
        assert exc_info.value.status_code == 403

    def test_issue_token_round_trip(self, verifier, guard):
        member = MemberModel(id=7, name="Zoë", email="zoe@example.com", role=Role.ADMIN)

        identity = guard.decode_token(verifier.issue_token(member))

        assert identity.name == "Zoë"
        assert identity.is_admin
