"""
Member and identity Pydantic models for the order desk.

An Identity is what a session token carries; a MemberModel is the stored
member as exposed through the API (never including the password hash).
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from .enums import Role


class Identity(BaseModel):
    """
    Authenticated caller decoded from a session token.

    Passed explicitly into every service operation that depends on who is
    asking.
    """
    model_config = ConfigDict(frozen=True)

    id: int
    email: str
    name: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


class MemberModel(BaseModel):
    """Public view of a member record."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str = Field(..., max_length=100)
    email: str = Field(..., max_length=255)
    role: Role
    vip: bool = False
    created_at: Optional[datetime] = None


class LoginResultModel(BaseModel):
    """Token and member summary returned by a successful login."""
    token: str
    user: MemberModel
