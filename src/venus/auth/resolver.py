"""Identity resolution: request headers → account id.

States: no token → AuthError; token → decode → id | AuthError.
A failed decode is never retried.

The localhost bypass exists for local frontend development only. It is
off unless VENUS_INSECURE_DEV_BYPASS=true, and Settings refuses that flag
outside the development environment. Only the exact host name
`localhost` (any port) qualifies.
"""

from collections.abc import Mapping

import structlog

from venus.auth.errors import AuthError, TokenError
from venus.auth.extract import extract_token, header_value
from venus.auth.jwt import decode_subject
from venus.config import Settings

logger = structlog.get_logger()

DEV_BYPASS_HOST = "localhost"


class IdentityResolver:
    """Resolve the authenticated account id for a request."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def bypass_applies(self, headers: Mapping[str, str]) -> bool:
        if not self.settings.insecure_dev_bypass:
            return False
        host = header_value(headers, "host") or ""
        hostname, _, _port = host.partition(":")
        return hostname.lower() == DEV_BYPASS_HOST

    def resolve(self, headers: Mapping[str, str]) -> int:
        """Return the account id, or raise AuthError."""
        if self.bypass_applies(headers):
            logger.warning(
                "auth.dev_bypass", user_id=self.settings.dev_bypass_user_id
            )
            return self.settings.dev_bypass_user_id

        token = extract_token(headers, self.settings.token_cookie_name)
        if token is None:
            raise AuthError()

        try:
            return decode_subject(token, secret=self.settings.jwt_secret)
        except TokenError as e:
            raise AuthError() from e
