from functools import lru_cache

import bcrypt
from webgate.configuration import get_settings


def hash_password(password: str) -> str:
    """Hash password using bcrypt with configured rounds"""
    _settings = get_settings()
    salt = bcrypt.gensalt(rounds=_settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash (bcrypt compares in constant time)"""
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"), hashed_password.encode("utf-8")
        )
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


@lru_cache()
def get_dummy_hash() -> str:
    """Return a dummy bcrypt hash for timing attack prevention.

    When an account doesn't exist, we still need to perform bcrypt verification
    so the response time does not reveal whether the e-mail is registered.
    Built with the configured rounds so both paths cost the same.
    """
    return hash_password("webgate-timing-guard")
