"""SSM Parameter Store access for frontend secrets.

The Stripe publishable key is normally supplied through the environment;
deployed stacks keep it in Parameter Store instead and this module reads it
from there.
"""

import logging
from functools import lru_cache
from typing import Any, Optional

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)


class SSMServiceError(Exception):
    """Raised when a parameter cannot be read."""

    pass


class SSMService:
    """Reads decrypted parameters and keeps them for the life of the process.

    Usage:
        key = get_ssm_service().get_parameter("/hotel/dev/stripe/publishable_key")
    """

    def __init__(self, client: Optional[Any] = None) -> None:
        """Initialize with an SSM client.

        Args:
            client: boto3 SSM client; a default one is created when omitted.
        """
        self._client = client or boto3.client("ssm")
        self._cache: dict[str, str] = {}

    def get_parameter(self, name: str, *, use_cache: bool = True) -> str:
        """Read a parameter value, decrypting SecureStrings.

        Args:
            name: Full parameter path.
            use_cache: Return a previously read value when available.

        Returns:
            The parameter value.

        Raises:
            SSMServiceError: If the parameter is missing or not readable.
        """
        if use_cache and name in self._cache:
            logger.debug("SSM cache hit for %s", name)
            return self._cache[name]

        try:
            logger.info("Fetching SSM parameter: %s", name)
            response = self._client.get_parameter(Name=name, WithDecryption=True)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code == "ParameterNotFound":
                raise SSMServiceError(f"SSM parameter not found: {name}") from e
            if error_code in ("AccessDenied", "AccessDeniedException"):
                raise SSMServiceError(
                    f"Access denied to SSM parameter: {name}. "
                    "Check IAM permissions for ssm:GetParameter."
                ) from e
            raise SSMServiceError(f"Failed to retrieve SSM parameter {name}: {e}") from e

        value = response["Parameter"]["Value"]
        self._cache[name] = value
        return value

    def clear_cache(self) -> None:
        self._cache.clear()
        logger.info("SSM parameter cache cleared")


@lru_cache(maxsize=1)
def get_ssm_service() -> SSMService:
    """Get the shared SSMService instance (singleton pattern)."""
    return SSMService()


def reset_ssm_service() -> None:
    """Forget the shared instance so the next call creates a new client."""
    get_ssm_service.cache_clear()
