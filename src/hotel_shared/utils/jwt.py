"""JWT helpers for reading claims from backend-issued tokens.

The frontend never verifies signatures; the backend does that on every call.
Claims are read only to decide whether a stored token is already stale.
"""

import base64
import json
import logging
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)


def decode_jwt_payload(token: str | None) -> dict[str, Any] | None:
    """Decode a JWT token and return its payload claims.

    Args:
        token: JWT token string

    Returns:
        Decoded payload dict or None if decoding fails
    """
    if not token:
        return None

    try:
        # JWT format: header.payload.signature
        parts = token.split(".")
        if len(parts) != 3:
            logger.debug("Invalid JWT format: expected 3 parts, got %d", len(parts))
            return None

        payload_b64 = parts[1]

        # base64url requires padding to a multiple of 4
        padding = 4 - len(payload_b64) % 4
        if padding != 4:
            payload_b64 += "=" * padding

        payload = json.loads(base64.urlsafe_b64decode(payload_b64))
        return payload if isinstance(payload, dict) else None

    except (ValueError, json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Failed to decode JWT payload: %s", type(e).__name__)
        return None


def get_token_expiry(token: str | None) -> datetime | None:
    """Return the token's `exp` claim as an aware datetime, if present."""
    payload = decode_jwt_payload(token)
    if not payload:
        return None

    exp = payload.get("exp")
    if not isinstance(exp, (int, float)):
        return None

    return datetime.fromtimestamp(exp, tz=UTC)


def is_token_expired(token: str | None, now: datetime | None = None) -> bool:
    """Check whether a token carries an `exp` claim in the past.

    Tokens without a readable `exp` are treated as live; the backend will
    reject them with a 401 if they are not.
    """
    expiry = get_token_expiry(token)
    if expiry is None:
        return False
    return expiry <= (now or datetime.now(UTC))
