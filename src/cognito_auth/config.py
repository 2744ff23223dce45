"""
Strategy configuration for the Cognito OAuth2 provider.

The user-pool domain is the only endpoint that has to be configured: the
authorize and token endpoints hang off it at fixed paths. Values can be passed
directly or read from COGNITO_* environment variables (load .env first).

Scope is optional. Without one, Cognito grants every scope enabled on the app
client. Requesting "openid" makes Authlib validate the ID token, which needs the
pool's OIDC metadata, so user_pool_id is required in that case.
"""

import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from .errors import ConfigurationError

AUTHORIZE_PATH = "/oauth2/authorize"
TOKEN_PATH = "/oauth2/token"
DEFAULT_REGION = "us-east-1"

_TRUTHY = {"1", "true", "yes", "on"}


def _is_absolute_http_url(value: str) -> bool:
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


@dataclass(frozen=True)
class StrategyConfig:
    """Immutable settings for one Cognito user-pool app client."""

    client_domain: str
    client_id: str
    client_secret: str
    callback_url: str
    region: str = DEFAULT_REGION
    pass_request_to_callback: bool = False
    scope: Optional[str] = None
    user_pool_id: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.client_domain, str):
            object.__setattr__(self, "client_domain", self.client_domain.strip().rstrip("/"))

    @property
    def authorization_url(self) -> str:
        return f"{self.client_domain}{AUTHORIZE_PATH}"

    @property
    def token_url(self) -> str:
        return f"{self.client_domain}{TOKEN_PATH}"

    @property
    def server_metadata_url(self) -> Optional[str]:
        """OIDC discovery document of the user pool, when the pool id is known."""
        if not self.user_pool_id:
            return None
        return (
            f"https://cognito-idp.{self.region}.amazonaws.com/"
            f"{self.user_pool_id}/.well-known/openid-configuration"
        )

    def validate(self) -> "StrategyConfig":
        """Raise ConfigurationError for the first missing or malformed field."""
        for name in ("client_domain", "client_id", "client_secret", "callback_url", "region"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ConfigurationError(f"{name} is required", field=name)

        if not _is_absolute_http_url(self.client_domain):
            raise ConfigurationError(
                f"client_domain must be an absolute http(s) URL, got {self.client_domain!r}",
                field="client_domain",
            )
        if not _is_absolute_http_url(self.callback_url):
            raise ConfigurationError(
                f"callback_url must be an absolute http(s) URL, got {self.callback_url!r}",
                field="callback_url",
            )
        if self.scope and "openid" in self.scope.split() and not self.user_pool_id:
            raise ConfigurationError(
                "user_pool_id is required when the openid scope is requested",
                field="user_pool_id",
            )
        return self

    @classmethod
    def create(cls, **kwargs) -> "StrategyConfig":
        """Build and validate in one step."""
        return cls(**kwargs).validate()

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "StrategyConfig":
        """
        Build a validated config from COGNITO_* variables.

        COGNITO_REGION falls back to AWS_REGION and then us-east-1.
        COGNITO_PASS_REQUEST accepts 1/true/yes/on.
        """
        env = os.environ if environ is None else environ
        return cls.create(
            client_domain=env.get("COGNITO_DOMAIN", ""),
            client_id=env.get("COGNITO_CLIENT_ID", ""),
            client_secret=env.get("COGNITO_CLIENT_SECRET", ""),
            callback_url=env.get("COGNITO_CALLBACK_URL", ""),
            region=env.get("COGNITO_REGION") or env.get("AWS_REGION") or DEFAULT_REGION,
            pass_request_to_callback=env.get("COGNITO_PASS_REQUEST", "").lower() in _TRUTHY,
            scope=env.get("COGNITO_SCOPE") or None,
            user_pool_id=env.get("COGNITO_USER_POOL_ID") or None,
        )
