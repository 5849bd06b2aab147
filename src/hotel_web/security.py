"""Access control for pages.

Pages declare who may see them with the require_user dependency:

    @router.get("/admin/users")
    async def users_page(user: User = Depends(require_user([Role.ADMIN]))):
        ...

Anonymous visitors are sent to the login page with a return path; signed-in
users lacking every listed role are sent to /unauthorized. The backend
enforces the same rules on its own endpoints.
"""

from typing import Callable, Optional, Sequence
from urllib.parse import urlencode

from fastapi import Depends, Request

from hotel_shared.models.auth import User
from hotel_shared.models.enums import Role
from hotel_shared.services.session_store import Session

from .dependencies import get_session

STAFF_ROLES = (Role.ADMIN, Role.MANAGER)
ADMIN_ONLY = (Role.ADMIN,)

ADMIN_HOME = "/admin/dashboard"
UNAUTHORIZED_PATH = "/unauthorized"


class LoginRequired(Exception):
    """Raised when an anonymous visitor requests a protected page."""

    def __init__(self, return_to: str) -> None:
        super().__init__(f"Login required for {return_to}")
        self.return_to = return_to


class RoleRequired(Exception):
    """Raised when the signed-in user holds none of the required roles."""

    def __init__(self, roles: Sequence[Role]) -> None:
        super().__init__(f"One of roles {[r.value for r in roles]} required")
        self.roles = tuple(roles)


def safe_return_to(value: Optional[str]) -> Optional[str]:
    """Accept only same-site absolute paths as a post-login destination."""
    if not value or not value.startswith("/") or value.startswith("//"):
        return None
    return value


def login_url(return_to: Optional[str] = None) -> str:
    target = safe_return_to(return_to)
    if not target:
        return "/login"
    return f"/login?{urlencode({'return_to': target})}"


def _request_path(request: Request) -> str:
    if request.url.query:
        return f"{request.url.path}?{request.url.query}"
    return request.url.path


def require_user(roles: Optional[Sequence[Role]] = None) -> Callable[..., User]:
    """Create a dependency returning the signed-in user.

    Args:
        roles: Roles allowed to see the page; any authenticated user when None.

    Raises:
        LoginRequired: If the session is anonymous.
        RoleRequired: If the user holds none of `roles`.
    """

    def dependency(request: Request, session: Session = Depends(get_session)) -> User:
        user = session.current_user
        if user is None:
            raise LoginRequired(return_to=_request_path(request))
        if roles and not user.has_any_role(roles):
            raise RoleRequired(roles)
        return user

    return dependency


def post_login_redirect(user: User, return_to: Optional[str] = None) -> str:
    """Where to go after a successful login.

    Staff always land on the admin dashboard; guests return to where they
    were sent from, or the home page.
    """
    if user.is_staff:
        return ADMIN_HOME
    return safe_return_to(return_to) or "/"
