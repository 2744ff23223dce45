"""
FastAPI auth router: login, callback, /me, logout.

Drives a strategy (normally CognitoStrategy) and keeps the authenticated user in
the Starlette session. The app must install SessionMiddleware, and the user the
verify callback hands to done() must be JSON-serializable (it is stored as
"account").
"""

import time

from authlib.common.errors import AuthlibBaseError
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, RedirectResponse

from .errors import ProfileResolutionError
from .protocol import AuthStrategy


def _error_response(error: BaseException, info=None) -> JSONResponse:
    """Map a failed attempt onto a JSON error: 400 OAuth/ID token, 502 Cognito, 500 anything else."""
    if isinstance(error, AuthlibBaseError):
        status_code = 400
        code = error.error or "oauth_error"
    elif isinstance(error, ProfileResolutionError):
        status_code = 502
        code = error.code
    else:
        status_code = 500
        code = "verify_failed"
    body = {"error": code, "detail": str(error)}
    if info is not None:
        body["info"] = info
    return JSONResponse(body, status_code=status_code)


def create_auth_router(strategy: AuthStrategy, success_url: str = "/me"):
    """Create an APIRouter with /login, /auth/callback, /me, and /logout endpoints."""
    router = APIRouter()

    @router.get("/login")
    async def login(request: Request):
        """Redirect the user to the Cognito hosted UI."""
        return await strategy.login_redirect(request)

    @router.get("/auth/callback", name="auth_callback")
    async def auth_callback(request: Request):
        """Handle OAuth callback: authenticate, store the user, redirect to success_url."""
        result = await strategy.authenticate(request)
        if result.error is not None:
            return _error_response(result.error, result.info)
        if not result.user:
            return JSONResponse(
                {"error": "authentication_failed", "info": result.info}, status_code=401
            )

        request.session["user"] = {
            "username": result.profile.username,
            "profile": dict(result.profile),
            "account": result.user,
            "login_at": int(time.time()),
        }
        return RedirectResponse(url=success_url)

    @router.get("/me")
    async def me(request: Request):
        """Return the current user; redirect to /login if not authenticated."""
        if "user" not in request.session:
            return RedirectResponse(url="/login")
        return {"user": request.session["user"]}

    @router.get("/logout")
    async def logout(request: Request):
        """Clear session and redirect to home."""
        request.session.clear()
        return RedirectResponse(url="/")

    return router
