"""
Registration Workflow

Membership requests move from pending to accepted or denied, never back.
An identifier may hold two platform handles, "JavaName[]BedrockName"; the
second one is optional and may be "none".
"""
import enum
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from webgate.constants import EMPTY_PLATFORM_HANDLE, IDENTIFIER_DELIMITER
from webgate.errors import Errors
from webgate.models.registration_request import RegistrationRequest, RegistrationStatus
from webgate.utils.masking import mask_email
from webgate.utils.tokens import utcnow

logger = logging.getLogger(__name__)

_DUPLICATE_MESSAGES = {
    RegistrationStatus.PENDING: "Your registration is still pending",
    RegistrationStatus.ACCEPTED: "You are already registered",
    RegistrationStatus.DENIED: "Your previous registration was denied",
}


class ListFilter(str, enum.Enum):
    ALL = "all"
    PENDING = "pending"
    ACCEPTED = "accepted"
    DENIED = "denied"


@dataclass(frozen=True)
class AcceptedRegistration:
    """Result of an acceptance, carrying the handles for allow-list commands."""
    request_id: int
    identifier: str
    email: str
    java_handle: Optional[str]
    bedrock_handle: Optional[str]


def split_identifier(identifier: str) -> List[str]:
    return identifier.split(IDENTIFIER_DELIMITER)


def _match_keys(identifier: str) -> set:
    return {
        part.strip().lower()
        for part in split_identifier(identifier)
        if part.strip() and part.strip().lower() != EMPTY_PLATFORM_HANDLE
    }


def registration_email_data(request: RegistrationRequest) -> dict:
    """Placeholders for the registration and admin_notification templates."""
    return {
        "username": request.email,
        "ign": request.ign,
        "discord": request.discord,
        "telegram": request.telegram or "Not provided",
        "email": request.email,
        "type": request.category,
    }


def _platform_handle(parts: List[str], index: int) -> Optional[str]:
    if len(parts) <= index:
        return None
    handle = parts[index].strip()
    if not handle or handle.lower() == EMPTY_PLATFORM_HANDLE:
        return None
    return handle


class RegistrationWorkflow:
    def __init__(self, db: Session) -> None:
        self.db = db

    def submit(
        self,
        ign: str,
        discord: str,
        telegram: Optional[str],
        email: str,
        category: str,
    ) -> RegistrationRequest:
        """
        Store a new pending request.

        Raises:
            AppError: 409 when any request (any status) already uses the
                identifier, the Discord handle or the e-mail
        """
        existing = (
            self.db.query(RegistrationRequest)
            .filter(
                or_(
                    RegistrationRequest.ign == ign,
                    RegistrationRequest.discord == discord,
                    RegistrationRequest.email == email,
                )
            )
            .order_by(RegistrationRequest.id)
            .first()
        )
        if existing is not None:
            logger.info(
                f"[Register] Duplicate of request id={existing.id} (status={existing.status.value})"
            )
            raise Errors.conflict(_DUPLICATE_MESSAGES[existing.status])

        request = RegistrationRequest(
            ign=ign,
            discord=discord,
            telegram=telegram,
            email=email,
            category=category,
            status=RegistrationStatus.PENDING,
        )
        self.db.add(request)
        self.db.commit()
        self.db.refresh(request)

        logger.info(f"[Register] Pending request id={request.id} for {mask_email(email)}")
        return request

    def accept(
        self, identifier: str, actor: str, now: Optional[datetime] = None
    ) -> Optional[AcceptedRegistration]:
        """
        Accept the first pending request sharing a handle with ``identifier``.

        Handles are compared case-insensitively, component by component, so
        "STEVEO", "steve_be" and "steveo[]Steve_BE" all match a stored
        "steveo[]Steve_BE" while "steve" does not.

        Returns:
            The accepted request's handles, or None when no pending request matches
        """
        wanted = _match_keys(identifier)
        if not wanted:
            return None

        candidates = (
            self.db.query(RegistrationRequest)
            .filter(RegistrationRequest.status == RegistrationStatus.PENDING)
            .order_by(RegistrationRequest.id)
            .all()
        )
        decided_at = now or utcnow()

        for candidate in candidates:
            if not wanted & _match_keys(candidate.ign):
                continue

            # Conditional update so two concurrent accepts cannot both win
            updated = (
                self.db.query(RegistrationRequest)
                .filter(
                    RegistrationRequest.id == candidate.id,
                    RegistrationRequest.status == RegistrationStatus.PENDING,
                )
                .update(
                    {
                        RegistrationRequest.status: RegistrationStatus.ACCEPTED,
                        RegistrationRequest.decided_by: actor,
                        RegistrationRequest.decided_at: decided_at,
                    },
                    synchronize_session=False,
                )
            )
            self.db.commit()
            if not updated:
                continue

            parts = split_identifier(candidate.ign)
            logger.info(f"[Register] Accepted request id={candidate.id} by {actor}")
            return AcceptedRegistration(
                request_id=candidate.id,
                identifier=candidate.ign,
                email=candidate.email,
                java_handle=_platform_handle(parts, 0),
                bedrock_handle=_platform_handle(parts, 1),
            )

        logger.info(f"[Register] No pending request matches '{identifier}'")
        return None

    def deny(
        self, identifier: str, actor: str, reason: str, now: Optional[datetime] = None
    ) -> Optional[RegistrationRequest]:
        """
        Deny the pending request whose identifier equals ``identifier`` exactly.

        Returns:
            The denied request, or None when no pending request matches
        """
        request = (
            self.db.query(RegistrationRequest)
            .filter(
                RegistrationRequest.ign == identifier,
                RegistrationRequest.status == RegistrationStatus.PENDING,
            )
            .order_by(RegistrationRequest.id)
            .first()
        )
        if request is None:
            return None

        updated = (
            self.db.query(RegistrationRequest)
            .filter(
                RegistrationRequest.id == request.id,
                RegistrationRequest.status == RegistrationStatus.PENDING,
            )
            .update(
                {
                    RegistrationRequest.status: RegistrationStatus.DENIED,
                    RegistrationRequest.decided_by: actor,
                    RegistrationRequest.decided_at: now or utcnow(),
                    RegistrationRequest.deny_reason: reason,
                },
                synchronize_session=False,
            )
        )
        self.db.commit()
        if not updated:
            return None

        self.db.refresh(request)
        logger.info(f"[Register] Denied request id={request.id} by {actor}")
        return request

    def list(self, status_filter: ListFilter = ListFilter.ALL) -> List[RegistrationRequest]:
        query = self.db.query(RegistrationRequest)
        if status_filter != ListFilter.ALL:
            query = query.filter(
                RegistrationRequest.status == RegistrationStatus(status_filter.value)
            )
        return query.order_by(RegistrationRequest.id).all()
