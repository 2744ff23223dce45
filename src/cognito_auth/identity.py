"""
Cognito Identity Provider API client.

Wraps a boto3 "cognito-idp" client and exposes the one call the strategy needs,
GetUser, as a coroutine. boto3 is blocking, so the call runs in the loop's
default executor. botocore exceptions are translated into ProfileResolutionError
subclasses with the original exception chained.
"""

import asyncio
import functools
import logging
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError, ParamValidationError

from .errors import ProviderRejectionError, TransportError

logger = logging.getLogger(__name__)

# Error codes GetUser uses to say the token (or the user behind it) is not acceptable
REJECTION_CODES = {
    "NotAuthorizedException",
    "UserNotFoundException",
    "UserNotConfirmedException",
    "PasswordResetRequiredException",
    "ForbiddenException",
}


class CognitoIdentityClient:
    """Owns one boto3 cognito-idp client for a region; safe to share across requests."""

    def __init__(self, region: str, client: Optional[Any] = None):
        """Create the boto3 client; no request is sent until get_user is awaited."""
        self.region = region
        self._client = client if client is not None else boto3.client("cognito-idp", region_name=region)

    async def get_user(self, access_token: str) -> Dict[str, Any]:
        """Return the raw GetUser response for the user the access token belongs to."""
        if not access_token:
            raise ProviderRejectionError("Access token is empty", code="missing_access_token")

        loop = asyncio.get_running_loop()
        call = functools.partial(self._client.get_user, AccessToken=access_token)
        try:
            return await loop.run_in_executor(None, call)
        except ClientError as e:
            error = e.response.get("Error", {})
            error_code = error.get("Code", "Unknown")
            message = error.get("Message") or str(e)
            if error_code in REJECTION_CODES:
                logger.warning("Cognito rejected access token: %s", error_code)
            else:
                logger.warning("Cognito GetUser failed with %s", error_code)
            raise ProviderRejectionError(
                f"Cognito GetUser failed: {error_code}: {message}",
                error_code=error_code,
                original=e,
            ) from e
        except ParamValidationError as e:
            logger.warning("Access token failed request validation")
            raise ProviderRejectionError(
                "Access token is not a valid Cognito token",
                code="invalid_access_token",
                original=e,
            ) from e
        except BotoCoreError as e:
            logger.warning("Could not reach Cognito in %s: %s", self.region, e)
            raise TransportError(f"Could not reach Cognito: {e}", original=e) from e
