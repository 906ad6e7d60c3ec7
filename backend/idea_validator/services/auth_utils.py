"""JWT helpers for tokens issued by the hosted auth provider.

Rules
-----
- NO hardcoded secrets: the HS256 secret comes from AUTH_JWT_SECRET
- This service never issues tokens to end users; ``create_access_token``
  exists for local development and tests
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

from ..config import get_jwt_audience, get_jwt_secret

logger = logging.getLogger(__name__)

_JWT_ALGORITHM = "HS256"
_DEV_TOKEN_EXPIRE_MINUTES = 60


def create_access_token(user_id: str, email: str = "", expires_minutes: int = _DEV_TOKEN_EXPIRE_MINUTES) -> str:
    """Create a signed JWT shaped like the auth provider's access tokens."""
    payload = {
        "sub": user_id,
        "email": email,
        "exp": datetime.utcnow() + timedelta(minutes=expires_minutes),
    }
    audience = get_jwt_audience()
    if audience:
        payload["aud"] = audience
    return jwt.encode(payload, get_jwt_secret(), algorithm=_JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Decode and validate a JWT. Returns payload dict or None."""
    audience = get_jwt_audience()
    try:
        return jwt.decode(
            token,
            get_jwt_secret(),
            algorithms=[_JWT_ALGORITHM],
            audience=audience,
            options={"verify_aud": audience is not None},
        )
    except JWTError as exc:
        logger.debug("Rejected access token: %s", exc)
        return None
