"""
Session helpers and FastAPI dependencies for routes behind the Cognito login.

Reads the user stored in request.session by the auth callback.

Optional: set SESSION_MAX_AGE_SECONDS to require re-login that long after the
Cognito login (default 0 = never). Set SESSION_MAX_IDLE_SECONDS to treat the user
as inactive after that long without a request (default 0 = disabled).
"""

import os
import time
from typing import Optional

from fastapi import HTTPException, Request


def _session_max_age_seconds() -> int:
    """Seconds after login when the session is no longer accepted. 0 = disabled."""
    return int(os.getenv("SESSION_MAX_AGE_SECONDS", "0"))


def _session_max_idle_seconds() -> int:
    """Max seconds without a request before user is considered inactive. 0 = disabled."""
    return int(os.getenv("SESSION_MAX_IDLE_SECONDS", "0"))


def get_user(request: Request) -> Optional[dict]:
    """Return the session user ({"username", "profile", "account", "login_at"}) or None."""
    return request.session.get("user")


def is_session_stale(request: Request) -> bool:
    """
    Return True if the login is older than SESSION_MAX_AGE_SECONDS or the user has
    been idle longer than SESSION_MAX_IDLE_SECONDS.
    """
    max_age = _session_max_age_seconds()
    max_idle = _session_max_idle_seconds()
    now = int(time.time())

    if max_age > 0:
        user = get_user(request) or {}
        if now - user.get("login_at", 0) >= max_age:
            return True

    if max_idle > 0:
        last_at = request.session.get("last_activity_at", now)
        if now - last_at >= max_idle:
            return True

    return False


def touch_session_activity(request: Request) -> None:
    """Update last_activity_at in the session so idle timeout is based on recent requests."""
    request.session["last_activity_at"] = int(time.time())


def require_user():
    """Dependency: a fresh Cognito login is required. Returns the session user."""

    async def _dep(request: Request):
        user = get_user(request)
        if user is None:
            raise HTTPException(status_code=401, detail="Not authenticated")
        if is_session_stale(request):
            raise HTTPException(
                status_code=401,
                detail="Session expired or inactive; please log in again",
            )
        touch_session_activity(request)
        return user

    return _dep
