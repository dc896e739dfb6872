"""
E-mail Verification Router

The link mailed at signup lands here; the browser is always redirected to
the verification result page.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from webgate.constants import VERIFICATION_RESULT_PAGE
from webgate.database import get_db
from webgate.services.account_store import AccountStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["verification"])


def _redirect(query: str) -> RedirectResponse:
    return RedirectResponse(url=f"{VERIFICATION_RESULT_PAGE}?{query}", status_code=302)


@router.get("/verify")
def verify_email(token: Optional[str] = None, db: Session = Depends(get_db)):
    if not token:
        return _redirect("error=token_required")

    try:
        updated = AccountStore(db).mark_verified(token)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[Verify] Database error: {e}", exc_info=True)
        return _redirect("error=server_error")

    if updated:
        return _redirect("status=success")
    logger.info("[Verify] Invalid or expired verification token")
    return _redirect("error=invalid_token")
