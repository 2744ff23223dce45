"""
Cognito OAuth2 authentication strategy.

Exposes the strategy (CognitoStrategy), its configuration (StrategyConfig), the
profile normalization (Profile, build_profile), the error taxonomy, session
helpers and the FastAPI auth router factory (create_auth_router).
"""

from .cognito import STRATEGY_NAME, AttemptState, AuthResult, CognitoStrategy, ProfileResult
from .config import StrategyConfig
from .errors import (
    CognitoAuthError,
    ConfigurationError,
    MalformedResponseError,
    ProfileResolutionError,
    ProviderRejectionError,
    TransportError,
)
from .identity import CognitoIdentityClient
from .profile import Profile, build_profile
from .router import create_auth_router
from .session import get_user, is_session_stale, require_user, touch_session_activity

__all__ = [
    "STRATEGY_NAME",
    "AttemptState",
    "AuthResult",
    "CognitoStrategy",
    "ProfileResult",
    "StrategyConfig",
    "CognitoAuthError",
    "ConfigurationError",
    "MalformedResponseError",
    "ProfileResolutionError",
    "ProviderRejectionError",
    "TransportError",
    "CognitoIdentityClient",
    "Profile",
    "build_profile",
    "create_auth_router",
    "get_user",
    "is_session_stale",
    "require_user",
    "touch_session_activity",
]
