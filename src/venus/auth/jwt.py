"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. A token
is minted on every login/registration and never stored server-side.

Claims: {"sub": "42", "uid": 42, "username": "alice", "exp": <unix ts>}
- sub duplicates uid as a string (RFC 7519 wants a string subject)
- exp is now + VENUS_TOKEN_EXPIRE_DAYS (7 by default)

Every decode failure (bad signature, expired, garbage) raises the same
TokenError. Callers never learn which check failed.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
import structlog

from venus.auth.errors import SigningError, TokenError
from venus.config import settings

logger = structlog.get_logger()

REQUIRED_CLAIMS = ["exp", "sub", "uid", "username"]


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    username: str
    expires_at: datetime


def create_access_token(
    user_id: int,
    username: str,
    *,
    secret: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed access token for an account."""
    expires = datetime.now(timezone.utc) + (
        expires_delta
        if expires_delta is not None
        else timedelta(days=settings.token_expire_days)
    )
    payload = {
        "sub": str(user_id),
        "uid": int(user_id),
        "username": username,
        "exp": expires,
    }
    try:
        return jwt.encode(
            payload,
            secret or settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
    except (TypeError, ValueError, jwt.PyJWTError) as e:
        raise SigningError(f"Could not sign token: {e}") from e


def verify_token(token: str, *, secret: Optional[str] = None) -> TokenClaims:
    """Verify and decode a token.

    Returns the claims on success. Raises TokenError on any failure.
    """
    try:
        payload = jwt.decode(
            token,
            secret or settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.InvalidTokenError as e:
        logger.debug("auth.token_rejected", reason=type(e).__name__)
        raise TokenError("Invalid token") from e

    uid = payload.get("uid")
    username = payload.get("username")
    # bool is an int subclass; a forged {"uid": true} must not become user 1
    if (
        not isinstance(uid, int)
        or isinstance(uid, bool)
        or payload.get("sub") != str(uid)
        or not isinstance(username, str)
    ):
        logger.debug("auth.token_rejected", reason="inconsistent_claims")
        raise TokenError("Invalid token")

    return TokenClaims(
        user_id=uid,
        username=username,
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )


def decode_subject(token: str, *, secret: Optional[str] = None) -> int:
    """Verify a token and return just the account id."""
    return verify_token(token, secret=secret).user_id
