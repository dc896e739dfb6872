"""
Member Authentication Router

Signup with e-mail verification, login, and token checks.
"""
import logging

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from webgate.configuration import get_settings
from webgate.database import get_db
from webgate.dependencies import require_principal
from webgate.errors import Errors
from webgate.models.accounts import PrincipalKind
from webgate.schemas.auth import CredentialsRequest, LoginResponse, TokenCheckResponse
from webgate.schemas.registration import MessageResponse
from webgate.services.account_store import AccountStore
from webgate.services.notifier import Notifier, get_notifier
from webgate.services.token_authority import TokenAuthority
from webgate.utils.masking import mask_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=MessageResponse)
def signup(
    data: CredentialsRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    """
    Create an unverified member account and mail the verification link.

    The mail goes out after the account is committed; a delivery failure
    does not change the response.
    """
    if not data.is_complete:
        raise Errors.validation("Email and password are required")

    logger.info(f"[Signup] {mask_email(data.email)}")
    try:
        member = AccountStore(db).create_member(data.email, data.password)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[Signup] Database error: {e}", exc_info=True)
        raise Errors.persistence("Server error during signup", details=type(e).__name__)

    link = get_settings().EMAIL_VERIFICATION_LINK_BASE + member.verification_token
    background_tasks.add_task(
        notifier.deliver_template,
        member.email,
        "verification",
        {"username": member.email, "verification_link": link},
    )

    return MessageResponse(success=True, message="Account created. Please check your email.")


@router.post("/login", response_model=LoginResponse)
def login(data: CredentialsRequest, db: Session = Depends(get_db)):
    """Member login; the account must have completed e-mail verification."""
    if not data.is_complete:
        raise Errors.validation("Email and password are required")

    try:
        store = AccountStore(db)
        if not store.verify_credentials(data.email, data.password, PrincipalKind.MEMBER):
            logger.info(f"[Login] Rejected credentials for {mask_email(data.email)}")
            raise Errors.auth("Invalid email or password")

        member = store.get(PrincipalKind.MEMBER, data.email)
        if not member.verified:
            logger.info(f"[Login] Unverified member {mask_email(data.email)}")
            raise Errors.auth("Please verify your email before logging in")

        token = TokenAuthority(db).issue(PrincipalKind.MEMBER, member.email)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[Login] Database error: {e}", exc_info=True)
        raise Errors.persistence("Server error during login", details=type(e).__name__)

    if token is None:
        raise Errors.auth("Invalid email or password")

    return LoginResponse(token=token, email=data.email)


@router.get("/verify-token", response_model=TokenCheckResponse)
def verify_token(principal: PrincipalKind = Depends(require_principal)):
    """Check a bearer token of either principal kind."""
    return TokenCheckResponse(principal=principal.value)
