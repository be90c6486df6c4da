"""Locate a bearer token in request headers.

Learn: browsers can't attach an Authorization header to <img src=...>,
so image URLs rely on the `token` cookie set at login. API clients send
`Authorization: Bearer <token>`. When both are present the header wins.

Works on Starlette's case-insensitive Headers as well as plain dicts.
"""

from collections.abc import Mapping
from typing import Optional

BEARER_PREFIX = "Bearer "
TOKEN_COOKIE = "token"


def header_value(headers: Mapping[str, str], name: str) -> Optional[str]:
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, val in headers.items():
        if key.lower() == lowered:
            return val
    return None


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an `Authorization: Bearer <token>` value."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


def cookie_value(cookie_header: Optional[str], name: str = TOKEN_COOKIE) -> Optional[str]:
    """Find `name` in a `;`-separated `key=value` Cookie header."""
    if not cookie_header:
        return None
    for part in cookie_header.split(";"):
        key, sep, value = part.strip().partition("=")
        if sep and key == name:
            return value.strip() or None
    return None


def extract_token(
    headers: Mapping[str, str], cookie_name: str = TOKEN_COOKIE
) -> Optional[str]:
    """Return the request's token: Bearer header first, then cookie."""
    token = bearer_token(header_value(headers, "authorization"))
    if token:
        return token
    return cookie_value(header_value(headers, "cookie"), cookie_name)
