"""
auth/dependencies.py -- FastAPI Depends() helper that gates mutating routes.

Only one auth method exists: `Authorization: Bearer <token>`. The two failure
modes are kept distinct:
  - no bearer token on the request        -> AuthRequired (401)
  - token present but invalid or expired  -> AuthInvalid  (403)

A token whose principal no longer exists in the UserStore is treated as
invalid (403), so deleting a user revokes their outstanding tokens.

Layer rule: no imports from api/ or portfolio/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import Request

from auth.models import Principal
from auth.tokens import decode_access_token
from core.errors import AuthInvalid, AuthRequired


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def get_current_principal(request: Request) -> Principal:
    """Require a valid bearer token.

    Use as a FastAPI dependency:
        @router.post("/protected")
        def route(principal: Principal = Depends(get_current_principal)): ...
    """
    token = _bearer_token(request)
    if token is None:
        raise AuthRequired()

    principal = decode_access_token(token)
    if principal is None:
        raise AuthInvalid()

    user_store = request.app.state.user_store
    if user_store.get_by_id(principal.id) is None:
        raise AuthInvalid()
    return principal
