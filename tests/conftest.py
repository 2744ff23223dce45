"""Shared fixtures for the Cognito strategy tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from cognito_auth import CognitoStrategy, StrategyConfig

DOMAIN = "https://myapp.auth.us-west-2.amazoncognito.com"
CALLBACK = "https://myapp.com/auth/cognito/callback"


def get_user_response(username="alice", attributes=()):
    """Build a GetUser response in the shape boto3 returns it."""
    return {
        "Username": username,
        "UserAttributes": [{"Name": name, "Value": value} for name, value in attributes],
    }


@pytest.fixture
def config() -> StrategyConfig:
    return StrategyConfig.create(
        client_domain=DOMAIN,
        client_id="123-456-789",
        client_secret="shhh-its-a-secret",
        callback_url=CALLBACK,
        region="us-west-2",
    )


@pytest.fixture
def identity_client() -> AsyncMock:
    """Stand-in for CognitoIdentityClient; get_user returns alice with an email."""
    client = AsyncMock()
    client.get_user.return_value = get_user_response(attributes=[("email", "a@x.com")])
    return client


@pytest.fixture
def verify_accept():
    """Verify callback that accepts the profile as the user."""

    def verify(access_token, refresh_token, profile, done):
        done(None, {"username": profile.username}, {"message": "welcome"})

    return verify


def make_strategy(config, verify, identity_client, token=None):
    """Strategy with the Authlib client replaced so no HTTP is attempted."""
    strategy = CognitoStrategy(config, verify, identity_client=identity_client)
    strategy.client = MagicMock()
    strategy.client.authorize_access_token = AsyncMock(
        return_value=token if token is not None else {
            "access_token": "tok-123",
            "refresh_token": "refresh-456",
            "token_type": "Bearer",
            "expires_in": 3600,
        }
    )
    strategy.client.authorize_redirect = AsyncMock(return_value="redirect")
    return strategy


@pytest.fixture
def user_response():
    return get_user_response


@pytest.fixture
def strategy_factory(config, verify_accept, identity_client):
    """Build strategies with defaults from the other fixtures, overridable per test."""

    def _make(config=config, verify=verify_accept, identity_client=identity_client, token=None):
        return make_strategy(config, verify, identity_client, token)

    return _make
