"""FastAPI dependency providers for the web routes.

Usage in routes:
    from hotel_web.dependencies import get_api

    @router.get("/rooms")
    async def rooms_page(request: Request, api: ApiSession = Depends(get_api)):
        ...

Dependency graph:
    Session (per request, from SessionCookieMiddleware)
        └── ApiSession(ApiClient singleton, session.auth, session.cache)
                └── BookingFlow(ApiSession, StripeService singleton)

Testing:
    Override get_client to inject an ApiClient backed by httpx.MockTransport,
    and call reset_services() between tests.
"""

from fastapi import Depends, Request

from hotel_shared.config import reset_settings
from hotel_shared.endpoints.base import ApiSession
from hotel_shared.services.api_client import ApiClient, get_api_client
from hotel_shared.services.booking_flow import BookingFlow
from hotel_shared.services.session_store import Session, reset_session_store
from hotel_shared.services.ssm_service import reset_ssm_service
from hotel_shared.services.stripe_service import (
    StripeService,
    get_stripe_service,
    reset_stripe_service,
)


def get_session(request: Request) -> Session:
    """Session resolved by SessionCookieMiddleware."""
    return request.state.session


def get_client() -> ApiClient:
    return get_api_client()


def get_api(
    session: Session = Depends(get_session),
    client: ApiClient = Depends(get_client),
) -> ApiSession:
    """Backend access on behalf of the current browser session."""
    return ApiSession(client, session.auth, session.cache)


def get_stripe() -> StripeService:
    return get_stripe_service()


def get_booking_flow(
    api: ApiSession = Depends(get_api),
    stripe: StripeService = Depends(get_stripe),
) -> BookingFlow:
    return BookingFlow(api, stripe)


def reset_services() -> None:
    """Clear cached singletons so the next request rebuilds them from settings.

    Example:
        @pytest.fixture(autouse=True)
        def reset_state():
            yield
            reset_services()
    """
    get_api_client.cache_clear()
    reset_stripe_service()
    reset_ssm_service()
    reset_session_store()
    reset_settings()
