"""
Error types raised by the Cognito strategy.

ConfigurationError is raised at construction time and is fatal. Everything that
can go wrong while turning an access token into a profile derives from
ProfileResolutionError, so callers that only care that resolution failed can
catch that one type. The underlying boto/botocore exception is always chained.
"""

from typing import Optional


class CognitoAuthError(Exception):
    """Base class for all errors raised by this package."""

    code: str = "cognito_auth_error"

    def __init__(self, message: str, *, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ConfigurationError(CognitoAuthError):
    """Missing or malformed strategy configuration."""

    code = "invalid_configuration"

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ProfileResolutionError(CognitoAuthError):
    """The access token could not be exchanged for a user profile."""

    code = "profile_resolution_failed"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        original: Optional[BaseException] = None,
    ):
        super().__init__(message, code=code)
        self.original = original


class TransportError(ProfileResolutionError):
    """Cognito could not be reached (connection, DNS, timeout)."""

    code = "transport_error"


class ProviderRejectionError(ProfileResolutionError):
    """Cognito refused the access token or the request made with it."""

    code = "provider_rejected"

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        code: Optional[str] = None,
        original: Optional[BaseException] = None,
    ):
        super().__init__(message, code=code, original=original)
        self.error_code = error_code


class MalformedResponseError(ProfileResolutionError):
    """GetUser answered, but not with a username and an attribute list."""

    code = "malformed_response"
