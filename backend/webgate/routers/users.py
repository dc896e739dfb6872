"""
Registration Moderation Router

Operator-only listing, acceptance and denial of membership requests.

Security:
- Every endpoint requires an operator bearer token
- Transaction rollback handling; storage errors surface as generic messages
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from webgate.database import get_db
from webgate.dependencies import require_operator
from webgate.errors import Errors
from webgate.models.accounts import OperatorAccount
from webgate.schemas.registration import (
    AcceptRequest,
    DenyRequest,
    MessageResponse,
    RegistrationEntry,
    RegistrationList,
)
from webgate.services.notifier import Notifier, get_notifier
from webgate.services.registration_workflow import ListFilter, RegistrationWorkflow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_operator)])


@router.get("", response_model=RegistrationList)
def list_registrations(
    status_filter: ListFilter = Query(
        ListFilter.PENDING, alias="type", description="all, pending, accepted or denied"
    ),
    db: Session = Depends(get_db),
):
    """List membership requests in submission order."""
    try:
        requests = RegistrationWorkflow(db).list(status_filter)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[Users] Database error while listing: {e}", exc_info=True)
        raise Errors.persistence("Failed to load users", details=type(e).__name__)

    return RegistrationList(
        users=[RegistrationEntry.from_request(r).to_public_dict() for r in requests]
    )


@router.post("/accept", response_model=MessageResponse)
def accept_registration(
    data: AcceptRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    operator: OperatorAccount = Depends(require_operator),
):
    """Accept the pending request sharing any handle with ``ign``."""
    if not data.ign or not data.acceptedBy:
        raise Errors.validation("IGN and acceptedBy are required")

    logger.info(f"[Users] Accept '{data.ign}' by {data.acceptedBy} (operator id={operator.id})")
    try:
        accepted = RegistrationWorkflow(db).accept(data.ign.replace('"', ""), data.acceptedBy)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[Users] Database error while accepting: {e}", exc_info=True)
        raise Errors.persistence("Server error while accepting user", details=type(e).__name__)

    if accepted is None:
        raise Errors.not_found("Failed to accept user")

    background_tasks.add_task(
        notifier.deliver_template,
        accepted.email,
        "acceptance",
        {"ign": accepted.identifier, "accepted_by": data.acceptedBy},
    )
    return MessageResponse(success=True, message="User accepted successfully")


@router.post("/deny", response_model=MessageResponse)
def deny_registration(
    data: DenyRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    operator: OperatorAccount = Depends(require_operator),
):
    """Deny the pending request whose IGN matches exactly."""
    if not data.ign or not data.deniedBy or not data.reason:
        raise Errors.validation("IGN, deniedBy, and reason are required")

    logger.info(f"[Users] Deny '{data.ign}' by {data.deniedBy} (operator id={operator.id})")
    try:
        denied = RegistrationWorkflow(db).deny(data.ign, data.deniedBy, data.reason)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[Users] Database error while denying: {e}", exc_info=True)
        raise Errors.persistence("Server error while denying user", details=type(e).__name__)

    if denied is None:
        raise Errors.not_found("Failed to deny user")

    background_tasks.add_task(
        notifier.deliver_template,
        denied.email,
        "denial",
        {"ign": denied.ign, "denied_by": data.deniedBy, "reason": data.reason},
    )
    return MessageResponse(success=True, message="User denied successfully")
