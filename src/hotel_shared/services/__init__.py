"""Services for the hotel web frontend."""

from .api_client import ApiClient, close_api_client, get_api_client
from .query_cache import QueryCache, Tag
from .session_store import Notification, Session, SessionStore, get_session_store
from .ssm_service import SSMService, SSMServiceError, get_ssm_service
from .stripe_service import CardConfirmation, StripeService, get_stripe_service

__all__ = [
    "ApiClient",
    "close_api_client",
    "get_api_client",
    "QueryCache",
    "Tag",
    "Notification",
    "Session",
    "SessionStore",
    "get_session_store",
    "SSMService",
    "SSMServiceError",
    "get_ssm_service",
    "CardConfirmation",
    "StripeService",
    "get_stripe_service",
]
