"""
Dependencies

Bearer-token gates for the operator and any-principal endpoints.
"""
import logging
from typing import Optional
from fastapi import Depends, Header
from sqlalchemy.orm import Session
from webgate.database import get_db
from webgate.errors import Errors
from webgate.models.accounts import OperatorAccount, PrincipalKind
from webgate.services.token_authority import TokenAuthority

logger = logging.getLogger(__name__)


def bearer_token(
    authorization: Optional[str] = Header(None, alias="Authorization", description="Bearer token"),
) -> Optional[str]:
    """Token from an ``Authorization: Bearer <token>`` header, or None."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    return authorization[7:].strip() or None


def require_operator(
    token: Optional[str] = Depends(bearer_token),
    db: Session = Depends(get_db),
) -> OperatorAccount:
    """
    Operator token gate.

    Returns:
        The authenticated operator account

    Raises:
        AppError: 401 "Admin access required" when the token is missing,
            unknown or older than 24 hours
    """
    operator = TokenAuthority(db).authenticate(token, PrincipalKind.OPERATOR)
    if operator is None:
        logger.warning(f"[Auth] Operator gate rejected request (token {'present' if token else 'missing'})")
        raise Errors.auth("Admin access required")
    return operator


def require_principal(
    token: Optional[str] = Depends(bearer_token),
    db: Session = Depends(get_db),
) -> PrincipalKind:
    """Any authenticated principal: operator first, then verified member."""
    kind = TokenAuthority(db).verify_any(token)
    if kind is None:
        raise Errors.auth("Invalid or expired token")
    return kind
