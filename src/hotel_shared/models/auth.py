"""Authentication and user models.

This module defines:
- User: account as returned by /auth/me and the admin user endpoints
- Login/register/profile request bodies
- AuthState: the per-browser credentials the frontend holds
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .base import ApiModel
from .enums import Role


class User(ApiModel):
    """Hotel platform account."""

    id: str
    first_name: str = ""
    last_name: str = ""
    email: str
    phone_number: Optional[str] = None
    roles: list[Role] = Field(default_factory=list)
    avatar: Optional[str] = None
    provider: Optional[str] = None
    enabled: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def initials(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return "".join(p[0].upper() for p in parts) or self.email[:1].upper()

    def has_any_role(self, roles: list[Role] | tuple[Role, ...]) -> bool:
        return any(role in self.roles for role in roles)

    @property
    def is_staff(self) -> bool:
        """ADMIN or MANAGER: lands on the admin console after login."""
        return self.has_any_role((Role.ADMIN, Role.MANAGER))


class AuthResponse(ApiModel):
    """Response of /auth/login and /auth/register."""

    token: str
    user: User


class LoginRequest(ApiModel):
    email: str
    password: str


class RegisterRequest(ApiModel):
    first_name: str
    last_name: str
    email: str
    password: str
    phone_number: Optional[str] = None


class UpdateProfileRequest(ApiModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    avatar: Optional[str] = None


class CreateUserRequest(ApiModel):
    """Admin-created account."""

    first_name: str
    last_name: str
    email: str
    password: str
    phone_number: Optional[str] = None
    roles: list[Role] = Field(default_factory=lambda: [Role.GUEST])
    enabled: bool = True


class AuthState(BaseModel):
    """Credentials held for one browser session.

    Mirrors the backend login result; the frontend never mints tokens.
    """

    model_config = ConfigDict(validate_assignment=True)

    user: Optional[User] = None
    token: Optional[str] = None
    is_authenticated: bool = False
    authenticated_at: Optional[datetime] = Field(
        default=None, description="When set_credentials last ran"
    )
