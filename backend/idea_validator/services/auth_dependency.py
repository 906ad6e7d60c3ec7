"""FastAPI dependencies that resolve the caller from a bearer JWT.

Users live with the hosted auth provider; the token's ``sub`` claim is the
owner id used to scope reports and session state. Nothing is looked up in
the local database.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .auth_utils import decode_access_token

_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    id: str
    email: str = ""


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _resolve(creds: HTTPAuthorizationCredentials) -> CurrentUser:
    claims = decode_access_token(creds.credentials)
    if claims is None:
        raise _unauthorized("Invalid or expired token")
    if not claims.get("sub"):
        raise _unauthorized("Invalid token payload")
    return CurrentUser(id=str(claims["sub"]), email=claims.get("email") or "")


def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> CurrentUser:
    """Require a valid token; 401 when it is missing, invalid or expired."""
    if creds is None:
        raise _unauthorized("Authentication required")
    return _resolve(creds)


def get_optional_user(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> CurrentUser | None:
    """Anonymous callers get None, but a bad token is still a 401."""
    return _resolve(creds) if creds is not None else None
