"""
Protocols for the collaborators the auth router and strategy depend on.

CognitoStrategy satisfies AuthStrategy; CognitoIdentityClient satisfies
UserDirectory. Tests and alternative hosts can supply their own implementations.
"""

from typing import Any, Dict, Protocol, runtime_checkable


@runtime_checkable
class AuthStrategy(Protocol):
    """Protocol for an OAuth2 login strategy (redirect out, authenticate on return)."""

    name: str

    async def login_redirect(self, request):
        """Redirect the user to the identity provider login page."""
        ...

    async def authenticate(self, request):
        """Handle the OAuth callback: exchange code for token, resolve profile, run verify."""
        ...


@runtime_checkable
class UserDirectory(Protocol):
    """Protocol for the identity-provider API used to look up the token's user."""

    async def get_user(self, access_token: str) -> Dict[str, Any]:
        """Return the raw user record (username + attribute list) for access_token."""
        ...
