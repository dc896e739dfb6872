"""
Pydantic Schemas
- auth: signup/login bodies and responses
- registration: membership request bodies and listings
- content: page content bodies
"""
from webgate.schemas.auth import (
    CredentialsRequest,
    LoginResponse,
    AdminLoginResponse,
    TokenCheckResponse,
)
from webgate.schemas.registration import (
    RegistrationCreate,
    AcceptRequest,
    DenyRequest,
    RegistrationEntry,
    RegistrationList,
    MessageResponse,
)
from webgate.schemas.content import ContentUpdate, ContentResponse

__all__ = [
    'CredentialsRequest',
    'LoginResponse',
    'AdminLoginResponse',
    'TokenCheckResponse',
    'RegistrationCreate',
    'AcceptRequest',
    'DenyRequest',
    'RegistrationEntry',
    'RegistrationList',
    'MessageResponse',
    'ContentUpdate',
    'ContentResponse',
]
