"""
api/routes/auth.py -- Registration and login endpoints.

Routes:
  POST /api/auth/register  -- create a principal; 201 {id, username, email}
  POST /api/auth/login     -- password login; {token, user: {id, username}}

Security:
  Both routes are rate-limited per client address (slowapi).
  authenticate_user() provides timing equalization -- use it, never inline.
  Wrong username and wrong password produce the identical 401 body.
  Cache-Control: no-store on login responses so tokens are not cached.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.limiter import limiter
from api.models import LoginRequest, LoginResponse, LoginUser, RegisterRequest, UserResponse
from auth.store import UserStore
from auth.tokens import authenticate_user, create_access_token, register_user
from core.config import get_settings
from core.errors import AuthInvalid, PortfolioError

logger = logging.getLogger("portfolio.auth")

_settings = get_settings()

# Auth policy: both routes are public -- they are how a client obtains a token.
router = APIRouter()


@limiter.limit(_settings.register_rate_limit)
@router.post("/auth/register", response_model=UserResponse, status_code=201)
def register(request: Request, body: RegisterRequest) -> UserResponse:
    """Create a new principal. Raises Conflict (400) if username or email is taken."""
    if not _settings.self_registration_enabled:
        raise PortfolioError(
            "Self-registration is disabled.",
            status_code=403,
            code="registration_disabled",
        )
    user_store: UserStore = request.app.state.user_store
    user = register_user(user_store, body.username, body.email, body.password)
    return UserResponse.from_domain(user)


@limiter.limit(_settings.login_rate_limit)
@router.post("/auth/login", response_model=LoginResponse)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with username and password and return a bearer token.

    Returns the same generic error for wrong username and wrong password
    ("bad_credentials") to avoid leaking username existence information.
    """
    user_store: UserStore = request.app.state.user_store
    user = authenticate_user(user_store, body.username, body.password)
    if user is None:
        logger.info("Failed login for username=%r", body.username)
        raise AuthInvalid(
            "Invalid username or password.",
            status_code=401,
            code="bad_credentials",
            headers={"Cache-Control": "no-store"},
        )

    token = create_access_token(user.id, user.username)
    resp = JSONResponse(
        status_code=200,
        content=LoginResponse(token=token, user=LoginUser(id=user.id, username=user.username)).model_dump(),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp
