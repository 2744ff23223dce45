"""
FastAPI app: AWS Cognito OAuth login + session-based auth.

Decisions:
- .env is loaded before the strategy is built so COGNITO_* and SESSION_SECRET
  are available (see cognito_auth.config for the variable names).
- verify accepts every Cognito user and keys it by username; a real app would
  find or create its own user record here and call done(None, False) to refuse.
- Session secret from SESSION_SECRET env; default "change-me" is for dev only.
"""

import logging
import os

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from starlette.middleware.sessions import SessionMiddleware

from cognito_auth import (
    CognitoStrategy,
    StrategyConfig,
    create_auth_router,
    require_user,
)

load_dotenv()
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))

SESSION_SECRET = os.getenv("SESSION_SECRET", "change-me")


def verify(access_token, refresh_token, profile, done):
    """Accept any Cognito user; the profile becomes the session user."""
    done(None, {"username": profile.username, "email": profile.get("email")})


strategy = CognitoStrategy(StrategyConfig.from_env(), verify)

app = FastAPI()
app.add_middleware(SessionMiddleware, secret_key=SESSION_SECRET)
app.include_router(create_auth_router(strategy))


@app.get("/")
async def home(request: Request):
    user = request.session.get("user")
    return {"logged_in": bool(user), "user": user}


@app.get("/private")
async def private_area(user=Depends(require_user())):
    return {"ok": True, "username": user["username"]}
