"""
Database models
- MemberAccount / OperatorAccount: the two principal kinds
- RegistrationRequest: membership request
- PageContent: editable page sections
"""
from webgate.models.accounts import MemberAccount, OperatorAccount, PrincipalKind, ACCOUNT_MODELS
from webgate.models.registration_request import RegistrationRequest, RegistrationStatus
from webgate.models.page_content import PageContent

__all__ = [
    'MemberAccount',
    'OperatorAccount',
    'PrincipalKind',
    'ACCOUNT_MODELS',
    'RegistrationRequest',
    'RegistrationStatus',
    'PageContent',
]
