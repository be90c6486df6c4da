"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers (and at the
include_router level in api/__init__.py) to resolve the current account
from the request. Route code only ever sees a CurrentIdentity; it never
touches tokens or cookies itself.

Every authentication failure leaves through get_current_user as the
same 401, whatever the cause.
"""

from fastapi import Depends, HTTPException, Request

from venus.auth.errors import AuthError
from venus.auth.resolver import IdentityResolver
from venus.config import Settings, get_settings

UNAUTHENTICATED_DETAIL = "Authentication required"


class CurrentIdentity:
    """The authenticated account making the request.

    Learn: user_id is the only authorization input in this system;
    services take it and filter every query by owner_id == user_id.
    """

    def __init__(self, user_id: int):
        self.user_id = user_id


def get_identity_resolver(
    settings: Settings = Depends(get_settings),
) -> IdentityResolver:
    return IdentityResolver(settings)


def unauthenticated() -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=UNAUTHENTICATED_DETAIL,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    request: Request,
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> CurrentIdentity:
    """Resolve the current identity (required, 401 if missing or invalid)."""
    try:
        return CurrentIdentity(user_id=resolver.resolve(request.headers))
    except AuthError:
        raise unauthenticated()
