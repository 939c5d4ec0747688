"""
Member profile lookup and provisioning.

Self-service registration is not part of the API; members are provisioned
through the operational CLI.
"""

import logging
from typing import Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..database.config import DatabaseConfig
from ..database.models import Member
from ..models.enums import Role
from ..models.member import Identity, MemberModel
from .auth import hash_password
from .exceptions import InternalError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class MemberService:
    """Reads and provisions member records."""

    def __init__(self, db_config: DatabaseConfig):
        self.db = db_config

    def get_profile(self, identity: Identity) -> MemberModel:
        """
        Return the caller's current member record.

        Raises:
            NotFoundError: If the member no longer exists
        """
        try:
            with self.db.get_session_context() as session:
                member = session.get(Member, identity.id)
                profile = MemberModel.model_validate(member) if member is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to load profile for member {identity.id}: {e}")
            raise InternalError() from e

        if profile is None:
            raise NotFoundError("User not found")
        return profile

    def create_member(
        self,
        email: str,
        name: str,
        password: str,
        role: Union[Role, str] = Role.USER,
        vip: bool = False,
    ) -> MemberModel:
        """
        Provision a member with a bcrypt-hashed password.

        Raises:
            ValidationError: If a field is missing, the role is unknown, or the
                email is already registered
        """
        if not email or not name or not password:
            raise ValidationError("Email, name and password are required")
        try:
            role = Role(role)
        except ValueError as e:
            raise ValidationError(f"Unknown role: {role}") from e

        try:
            with self.db.get_session_context() as session:
                existing = session.execute(
                    select(Member.id).where(Member.email == email)
                ).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up member {email}: {e}")
            raise InternalError() from e

        if existing is not None:
            raise ValidationError("Email is already registered")

        try:
            with self.db.get_session_context() as session:
                member = Member(
                    email=email,
                    name=name,
                    password=hash_password(password),
                    role=role.value,
                    vip=vip,
                )
                session.add(member)
                session.flush()
                created = MemberModel.model_validate(member)
        except IntegrityError as e:
            raise ValidationError("Email is already registered") from e
        except SQLAlchemyError as e:
            logger.error(f"Failed to create member {email}: {e}")
            raise InternalError() from e

        logger.info(f"Member {created.id} provisioned with role {role.value}")
        return created
