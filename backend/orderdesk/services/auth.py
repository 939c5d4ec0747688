"""
Credential verification and access guarding.

This module implements the two authentication components:
- CredentialVerifier: checks email/password against bcrypt hashes and issues
  signed, time-limited session tokens (HS256 JWT)
- AccessGuard: validates bearer tokens on protected requests and enforces
  role requirements

Tokens are self-contained. There is no server-side session store and no
revocation; a token stays valid until it expires.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from ..database.config import DatabaseConfig
from ..database.models import Member
from ..models.enums import Role
from ..models.member import Identity, MemberModel, LoginResultModel
from .exceptions import (
    AuthenticationError,
    ForbiddenError,
    InternalError,
    InvalidTokenError,
    MissingTokenError,
    ValidationError,
)

logger = logging.getLogger(__name__)

TOKEN_ALGORITHM = "HS256"
DEFAULT_TOKEN_TTL_SECONDS = 3600


def hash_password(password: str) -> str:
    """Hash a plain password with a fresh bcrypt salt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check a password against a stored bcrypt hash; malformed hashes never match."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


class CredentialVerifier:
    """
    Validates member credentials and issues session tokens.

    Unknown emails and wrong passwords raise the same AuthenticationError so
    callers cannot tell which accounts exist.
    """

    def __init__(self, db_config: DatabaseConfig, secret: str,
                 token_ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS):
        """
        Initialize the credential verifier.

        Args:
            db_config: Database configuration owning the connection pool
            secret: Token signing secret shared with AccessGuard
            token_ttl_seconds: Lifetime of issued tokens
        """
        self.db = db_config
        self.secret = secret
        self.token_ttl = timedelta(seconds=token_ttl_seconds)

    def login(self, email: Optional[str], password: Optional[str]) -> LoginResultModel:
        """
        Authenticate a member and issue a session token.

        Args:
            email: Member email
            password: Plain password

        Returns:
            LoginResultModel with the token and the member summary

        Raises:
            ValidationError: If email or password is missing
            AuthenticationError: If the credentials do not match a member
            InternalError: If the member lookup fails
        """
        if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
            raise ValidationError("Email and password are required")

        try:
            with self.db.get_session_context() as session:
                member = session.execute(
                    select(Member).where(Member.email == email)
                ).scalar_one_or_none()
                user = MemberModel.model_validate(member) if member is not None else None
                password_hash = member.password if member is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Member lookup failed during login: {e}")
            raise InternalError() from e

        if user is None or not verify_password(password, password_hash):
            logger.warning("Rejected login attempt")
            raise AuthenticationError()

        token = self.issue_token(user)
        logger.info(f"Member {user.id} logged in")
        return LoginResultModel(token=token, user=user)

    def issue_token(self, member: MemberModel) -> str:
        """Sign a token embedding the member's identity and role."""
        now = datetime.now(timezone.utc)
        claims = {
            "id": member.id,
            "email": member.email,
            "name": member.name,
            "role": member.role.value,
            "iat": now,
            "exp": now + self.token_ttl,
        }
        return jwt.encode(claims, self.secret, algorithm=TOKEN_ALGORITHM)


class AccessGuard:
    """Validates session tokens and enforces role requirements."""

    def __init__(self, secret: str):
        self.secret = secret

    def authenticate(self, authorization: Optional[str]) -> Identity:
        """
        Resolve the caller from an ``Authorization: Bearer <token>`` header.

        Args:
            authorization: Raw Authorization header value, if any

        Returns:
            Identity decoded from the token

        Raises:
            MissingTokenError: If no bearer token was supplied
            InvalidTokenError: If the token is forged, expired, or malformed
        """
        token = self._extract_bearer_token(authorization)
        if token is None:
            raise MissingTokenError()
        return self.decode_token(token)

    def decode_token(self, token: str) -> Identity:
        """Verify a token's signature and expiry and return its identity."""
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[TOKEN_ALGORITHM],
                options={"require": ["exp"]},
            )
        except jwt.PyJWTError as e:
            logger.debug(f"Token rejected: {e}")
            raise InvalidTokenError() from e

        try:
            return Identity(
                id=claims.get("id"),
                email=claims.get("email"),
                name=claims.get("name"),
                role=claims.get("role"),
            )
        except PydanticValidationError as e:
            logger.debug(f"Token claims rejected: {e}")
            raise InvalidTokenError() from e

    @staticmethod
    def require_role(identity: Identity, role: Role,
                     message: Optional[str] = None) -> None:
        """
        Ensure the identity holds the given role.

        Raises:
            ForbiddenError: If the identity's role differs
        """
        if identity.role is not role:
            raise ForbiddenError(message)

    @staticmethod
    def _extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
        if not authorization:
            return None
        parts = authorization.split(None, 1)
        if len(parts) != 2 or parts[0].lower() != "bearer":
            return None
        return parts[1].strip() or None
