"""Password hashing utilities.

Learn: Uses bcrypt for password hashing. bcrypt salts every hash and
embeds salt + cost in the output ("$2b$12$..."), so verification only
needs the stored hash. The work factor comes from VENUS_BCRYPT_ROUNDS
(default 12, ~250ms per hash). Passwords are truncated to 72 bytes
(bcrypt's limit).

Hashing is deliberately slow, so request handlers use the *_async
variants, which run on a small bounded thread pool instead of the
event loop.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import bcrypt

from venus.auth.errors import CredentialError
from venus.config import settings

BCRYPT_MAX_BYTES = 72

_executor: Optional[ThreadPoolExecutor] = None


def _encode(password: str) -> bytes:
    try:
        return password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    except (UnicodeEncodeError, AttributeError) as e:
        raise CredentialError(f"Password is not encodable: {e}") from e


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password with bcrypt.

    Raises CredentialError if bcrypt rejects the input or cost factor.
    """
    pw_bytes = _encode(password)
    try:
        salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
        return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")
    except (ValueError, TypeError) as e:
        raise CredentialError(f"bcrypt hash failed: {e}") from e


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against a stored bcrypt hash.

    Returns False on mismatch. Raises CredentialError only when the
    stored hash itself is not a valid bcrypt hash.
    """
    pw_bytes = _encode(password)
    try:
        hash_bytes = password_hash.encode("ascii")
    except (UnicodeEncodeError, AttributeError) as e:
        raise CredentialError("Stored password hash is malformed") from e
    try:
        return bcrypt.checkpw(pw_bytes, hash_bytes)
    except (ValueError, TypeError) as e:
        raise CredentialError("Stored password hash is malformed") from e


def _get_executor() -> ThreadPoolExecutor:
    global _executor
    if _executor is None:
        _executor = ThreadPoolExecutor(
            max_workers=settings.password_hash_workers,
            thread_name_prefix="venus-bcrypt",
        )
    return _executor


async def hash_password_async(password: str) -> str:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_get_executor(), hash_password, password)


async def verify_password_async(password: str, password_hash: str) -> bool:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        _get_executor(), verify_password, password, password_hash
    )


def shutdown_executor() -> None:
    """Stop the hashing pool (called from the app lifespan)."""
    global _executor
    if _executor is not None:
        _executor.shutdown(wait=False)
        _executor = None
