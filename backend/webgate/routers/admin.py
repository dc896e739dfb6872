"""
Operator Login Router
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from webgate.database import get_db
from webgate.errors import Errors
from webgate.models.accounts import PrincipalKind
from webgate.schemas.auth import AdminLoginResponse, CredentialsRequest
from webgate.services.account_store import AccountStore
from webgate.services.token_authority import TokenAuthority
from webgate.utils.masking import mask_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/login", response_model=AdminLoginResponse)
def admin_login(data: CredentialsRequest, db: Session = Depends(get_db)):
    """
    Operator login.

    Operator accounts are only created from the CLI (``webgate alogin``).
    """
    if not data.is_complete:
        raise Errors.validation("Email and password are required")

    logger.info(f"[Admin Login] Attempt for {mask_email(data.email)}")
    try:
        if not AccountStore(db).verify_credentials(data.email, data.password, PrincipalKind.OPERATOR):
            logger.warning(f"[Admin Login] Rejected credentials for {mask_email(data.email)}")
            raise Errors.auth("Invalid admin credentials")

        token = TokenAuthority(db).issue(PrincipalKind.OPERATOR, data.email)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[Admin Login] Database error: {e}", exc_info=True)
        raise Errors.persistence("Server error during admin login", details=type(e).__name__)

    if token is None:
        raise Errors.auth("Invalid admin credentials")

    return AdminLoginResponse(token=token, email=data.email)
