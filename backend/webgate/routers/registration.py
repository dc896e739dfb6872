"""
Registration Request Router

Public membership request submission. Confirmation and operator
notification mails are sent after the request is stored.
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from webgate.configuration import get_settings
from webgate.database import get_db
from webgate.errors import Errors
from webgate.schemas.registration import MessageResponse, RegistrationCreate
from webgate.services.notifier import Notifier, get_notifier
from webgate.services.registration_workflow import RegistrationWorkflow, registration_email_data

logger = logging.getLogger(__name__)

router = APIRouter(tags=["registration"])


@router.post("/register", response_model=MessageResponse)
def submit_registration(
    data: RegistrationCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    """
    Submit a membership request.

    Any earlier request with the same IGN, Discord handle or e-mail blocks
    the submission, whatever its status.
    """
    if not data.is_complete:
        raise Errors.validation("All required fields must be filled")

    logger.info(f"[Register Request] IGN: {data.ign}")
    try:
        request = RegistrationWorkflow(db).submit(
            ign=data.ign.strip(),
            discord=data.discord.strip(),
            telegram=data.telegram.strip() if data.telegram and data.telegram.strip() else None,
            email=data.email.strip(),
            category=data.type.strip(),
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[Register Request] Database error: {e}", exc_info=True)
        raise Errors.persistence("Server error during registration", details=type(e).__name__)

    email_data = registration_email_data(request)
    background_tasks.add_task(notifier.deliver_template, request.email, "registration", email_data)
    background_tasks.add_task(
        notifier.deliver_fanout,
        list(get_settings().REGISTRATION_ADMIN_EMAILS),
        "admin_notification",
        email_data,
    )

    return MessageResponse(
        success=True,
        message="Registration submitted successfully. Please wait for admin approval.",
    )
