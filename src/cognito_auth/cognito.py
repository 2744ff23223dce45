"""
AWS Cognito OAuth2 strategy.

Uses Authlib for the authorization-code exchange against the user-pool domain
and the Cognito Identity Provider API (GetUser) to turn the resulting access
token into a Profile. The application decides who the user is through a verify
callback:

    def verify(access_token, refresh_token, profile, done):
        done(None, find_or_create_user(profile))

done(err, user, info=None) must be called exactly once. Pass user=False to
reject the login without it being an error. With pass_request_to_callback the
request comes first: verify(request, access_token, refresh_token, profile, done).
verify may also be a coroutine function.
"""

import asyncio
import inspect
import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

import httpx
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.starlette_client import OAuth

from .config import StrategyConfig
from .errors import ConfigurationError, ProfileResolutionError
from .identity import CognitoIdentityClient
from .profile import Profile, build_profile
from .protocol import UserDirectory

logger = logging.getLogger(__name__)

STRATEGY_NAME = "cognito-oauth2"


class AttemptState(str, Enum):
    """Where a single authentication attempt is."""

    START = "start"
    EXCHANGING_TOKEN = "exchanging_token"
    RESOLVING_PROFILE = "resolving_profile"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ProfileResult:
    """Either an error or a profile, never both."""

    error: Optional[ProfileResolutionError] = None
    profile: Optional[Profile] = None


@dataclass
class AuthResult:
    """Outcome of CognitoStrategy.authenticate."""

    state: AttemptState
    user: Any = None
    info: Any = None
    error: Optional[BaseException] = None
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    profile: Optional[Profile] = None

    @property
    def ok(self) -> bool:
        return self.state is AttemptState.SUCCEEDED and self.error is None and bool(self.user)


class CognitoStrategy:
    """OAuth2 authorization-code strategy backed by an AWS Cognito user pool."""

    name: str = STRATEGY_NAME

    def __init__(
        self,
        config: StrategyConfig,
        verify: Callable[..., Any],
        *,
        identity_client: Optional[UserDirectory] = None,
        oauth: Optional[OAuth] = None,
    ):
        """Validate config, register the Authlib client and create the GetUser client."""
        if not isinstance(config, StrategyConfig):
            raise ConfigurationError("config must be a StrategyConfig")
        config.validate()
        if not callable(verify):
            raise ConfigurationError("verify callback must be callable", field="verify")

        self.config = config
        self.verify = verify

        self.oauth = oauth if oauth is not None else OAuth()
        if self.oauth.create_client(self.name) is not None:
            raise ConfigurationError(
                f"OAuth registry already has a client named {self.name!r}", field="oauth"
            )
        register_kwargs = {
            "client_id": config.client_id,
            "client_secret": config.client_secret,
            "authorize_url": config.authorization_url,
            "access_token_url": config.token_url,
        }
        if config.scope:
            register_kwargs["client_kwargs"] = {"scope": config.scope}
        if config.server_metadata_url:
            register_kwargs["server_metadata_url"] = config.server_metadata_url
        self.oauth.register(name=self.name, **register_kwargs)
        self.client = self.oauth.create_client(self.name)

        self.identity_client = (
            identity_client if identity_client is not None else CognitoIdentityClient(config.region)
        )
        logger.info(
            "Cognito strategy configured for %s (region %s)", config.client_domain, config.region
        )

    async def login_redirect(self, request):
        """Return a RedirectResponse to the Cognito hosted UI."""
        return await self.client.authorize_redirect(request, self.config.callback_url)

    async def user_profile(self, access_token: str) -> Profile:
        """Fetch the authenticated user from Cognito and normalize it into a Profile."""
        response = await self.identity_client.get_user(access_token)
        return build_profile(response)

    async def resolve_profile(self, access_token: str) -> ProfileResult:
        """Like user_profile, but reports failure in the result instead of raising."""
        try:
            profile = await self.user_profile(access_token)
        except ProfileResolutionError as e:
            return ProfileResult(error=e)
        return ProfileResult(profile=profile)

    async def authenticate(self, request) -> AuthResult:
        """Run one attempt: code exchange, profile resolution, then verify."""
        attempt = uuid.uuid4().hex[:8]
        self._transition(attempt, AttemptState.START)

        self._transition(attempt, AttemptState.EXCHANGING_TOKEN)
        try:
            token = await self.client.authorize_access_token(request)
        except (AuthlibBaseError, httpx.HTTPError) as e:
            logger.warning("Cognito token exchange failed: %s", e)
            return self._failed(attempt, error=e)

        access_token = token.get("access_token")
        refresh_token = token.get("refresh_token")

        self._transition(attempt, AttemptState.RESOLVING_PROFILE)
        resolved = await self.resolve_profile(access_token)
        if resolved.error is not None:
            return self._failed(
                attempt, error=resolved.error, access_token=access_token, refresh_token=refresh_token
            )

        profile = resolved.profile
        err, user, info = await self._call_verify(request, access_token, refresh_token, profile)
        if err is not None:
            return self._failed(
                attempt,
                error=err,
                info=info,
                access_token=access_token,
                refresh_token=refresh_token,
                profile=profile,
            )

        self._transition(attempt, AttemptState.SUCCEEDED)
        if user:
            logger.info("Cognito user %s authenticated", profile.username)
        else:
            logger.info("Cognito user %s rejected by verify callback", profile.username)
        return AuthResult(
            state=AttemptState.SUCCEEDED,
            user=user,
            info=info,
            access_token=access_token,
            refresh_token=refresh_token,
            profile=profile,
        )

    async def _call_verify(self, request, access_token, refresh_token, profile):
        """Invoke verify and wait for its done() call. Returns (err, user, info)."""
        loop = asyncio.get_running_loop()
        outcome = loop.create_future()

        def done(err=None, user=None, info=None):
            if outcome.done():
                logger.warning("verify callback called done() more than once; ignoring")
                return
            outcome.set_result((err, user, info))

        args = (access_token, refresh_token, profile, done)
        if self.config.pass_request_to_callback:
            args = (request,) + args

        try:
            returned = self.verify(*args)
            if inspect.isawaitable(returned):
                await returned
        except Exception as e:
            if outcome.done():
                logger.exception("verify callback raised after calling done()")
            else:
                logger.exception("verify callback raised")
                done(e, None)
        else:
            if not outcome.done():
                logger.warning("verify callback returned without calling done(); waiting")

        return await outcome

    def _failed(self, attempt: str, **fields) -> AuthResult:
        self._transition(attempt, AttemptState.FAILED)
        return AuthResult(state=AttemptState.FAILED, **fields)

    @staticmethod
    def _transition(attempt: str, state: AttemptState) -> None:
        logger.debug("auth attempt %s -> %s", attempt, state.value)
