"""
Token Utilities

Random token/credential generation and the shared 24-hour freshness window
used by session tokens and e-mail verification tokens.
"""
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from webgate.constants import (
    TOKEN_ALPHABET,
    TOKEN_LENGTH,
    OPERATOR_PASSWORD_ALPHABET,
    OPERATOR_PASSWORD_LENGTH,
    FRESHNESS_WINDOW_HOURS,
)

FRESHNESS_WINDOW = timedelta(hours=FRESHNESS_WINDOW_HOURS)


def _random_string(alphabet: str, length: int) -> str:
    return "".join(secrets.choice(alphabet) for _ in range(length))


def generate_secure_token() -> str:
    """32 characters from [A-Za-z0-9]"""
    return _random_string(TOKEN_ALPHABET, TOKEN_LENGTH)


def generate_secure_password() -> str:
    """16 characters from letters, digits and !@#$%^&*; shown once to the operator"""
    return _random_string(OPERATOR_PASSWORD_ALPHABET, OPERATOR_PASSWORD_LENGTH)


def utcnow() -> datetime:
    """Naive UTC timestamp, the representation stored in TIMESTAMP columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def freshness_cutoff(now: Optional[datetime] = None) -> datetime:
    """
    Oldest issue time still considered fresh.

    A token issued at ``issued_at`` is valid while ``issued_at > cutoff``.
    """
    return (now or utcnow()) - FRESHNESS_WINDOW

