"""Authentication endpoints."""

from ..config import get_settings
from ..models.auth import AuthResponse, User
from ..services.query_cache import USER, Tag
from .base import Mutation, Query, Request

login = Mutation(
    name="login",
    build=lambda credentials: Request("POST", "/auth/login", body=credentials),
    response=AuthResponse,
    public=True,
)

register = Mutation(
    name="register",
    build=lambda user_data: Request("POST", "/auth/register", body=user_data),
    response=AuthResponse,
    public=True,
)

get_current_user = Query(
    name="getCurrentUser",
    build=lambda _: Request("GET", "/auth/me"),
    response=User,
    provides=[Tag(USER)],
)

update_profile = Mutation(
    name="updateProfile",
    build=lambda user_data: Request("PUT", "/auth/profile", body=user_data),
    response=User,
    invalidates=[Tag(USER)],
)


def oauth2_authorize_url(provider: str) -> str:
    """Backend URL that starts the OAuth2 login for a provider."""
    return f"{get_settings().api_url.rstrip('/')}/auth/oauth2/{provider}"
