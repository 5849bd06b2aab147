"""Starlette middleware for the web app."""

from .correlation import CORRELATION_ID_HEADER, CorrelationIdMiddleware
from .session import SessionCookieMiddleware

__all__ = ["CORRELATION_ID_HEADER", "CorrelationIdMiddleware", "SessionCookieMiddleware"]
