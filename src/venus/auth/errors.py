"""Auth error taxonomy.

Learn: these carry no HTTP vocabulary. main.py and the auth dependency
render them:
- CredentialError / SigningError → 500 (details only in logs)
- AuthError → 401 in get_current_user, one fixed message whatever the cause
- OwnershipError → 404, same body as a genuinely missing resource
"""


class CredentialError(Exception):
    """Password hashing/verification primitive failed."""


class SigningError(Exception):
    """Token could not be encoded."""


class TokenError(Exception):
    """Token is invalid, expired, or malformed. Deliberately undifferentiated."""


class AuthError(Exception):
    """Request could not be authenticated."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class OwnershipError(Exception):
    """Resolved identity does not own the target resource."""

    def __init__(self, resource: str = "Resource"):
        self.resource = resource
        super().__init__(f"{resource} not found")
