"""Pydantic models and the user record for the users API."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class User:
    """Stored user. The plaintext password is never kept."""

    email: str
    password_hash: str
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def short(self) -> "UserShort":
        """Public view of the user without the password hash."""
        return UserShort(email=self.email)


# ============================================
# Request Models
# ============================================

class CredentialsRequest(BaseModel):
    """Body of the registration and login routes.

    Both fields are optional here so the handlers can answer a missing
    field with their own 400 response.
    """
    email: str | None = Field(None, description="User email address")
    password: str | None = Field(None, description="Plaintext password (never stored)")


# ============================================
# Response Models
# ============================================

class UserShort(BaseModel):
    """Public user view."""
    email: str


class RegisterResponse(BaseModel):
    """Response when a user is created."""
    token: str = Field(..., description="Bearer token for the new user")
    user: UserShort


class LoginResponse(BaseModel):
    """Response after a successful login."""
    auth: bool = True
    token: str = Field(..., description="Bearer token")
    user: UserShort


class VerificationResponse(BaseModel):
    """Response for a request carrying a valid token."""
    auth: bool = True
    message: str = "Authenticated."
