"""
Utility Functions
- password: credential hashing/verification
- tokens: token generation and the freshness window
- ip_utils: client address extraction
- masking: log-safe e-mail rendering
"""
from webgate.utils.password import (
    hash_password,
    verify_password,
    get_dummy_hash,
)
from webgate.utils.tokens import (
    generate_secure_token,
    generate_secure_password,
    freshness_cutoff,
    utcnow,
)
from webgate.utils.masking import mask_email

__all__ = [
    'hash_password',
    'verify_password',
    'get_dummy_hash',
    'generate_secure_token',
    'generate_secure_password',
    'freshness_cutoff',
    'utcnow',
    'mask_email',
]
