import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from webgate.errors import Errors
from webgate.models.accounts import ACCOUNT_MODELS, MemberAccount, OperatorAccount, PrincipalKind
from webgate.utils.masking import mask_email
from webgate.utils.password import get_dummy_hash, hash_password, verify_password
from webgate.utils.tokens import freshness_cutoff, generate_secure_token, utcnow

logger = logging.getLogger(__name__)


class AccountStore:
    """Member and operator account records."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, kind: PrincipalKind, email: str):
        model = ACCOUNT_MODELS[kind]
        return self.db.query(model).filter(model.email == email).first()

    def create_member(self, email: str, password: str, now: Optional[datetime] = None) -> MemberAccount:
        """
        Create an unverified member with a fresh verification token.

        Raises:
            AppError: 409 when the e-mail is already registered
        """
        if self.get(PrincipalKind.MEMBER, email) is not None:
            raise Errors.conflict("Email already exists")

        member = MemberAccount(
            email=email,
            password_hash=hash_password(password),
            verification_token=generate_secure_token(),
            verification_token_issued_at=now or utcnow(),
            verified=False,
        )
        self.db.add(member)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race against a concurrent signup for the same address
            self.db.rollback()
            raise Errors.conflict("Email already exists")

        self.db.refresh(member)
        logger.info(f"[Account] Member created: {mask_email(email)}")
        return member

    def create_or_update_operator(self, email: str, password: str) -> OperatorAccount:
        """Insert an operator, or rotate the credential of an existing one."""
        password_hash = hash_password(password)

        for attempt in range(2):
            operator = self.get(PrincipalKind.OPERATOR, email)
            if operator is None:
                operator = OperatorAccount(email=email, password_hash=password_hash)
                self.db.add(operator)
            else:
                operator.password_hash = password_hash
                operator.updated_at = utcnow()
            try:
                self.db.commit()
                break
            except IntegrityError:
                self.db.rollback()
                if attempt:
                    raise
                # Row appeared concurrently; retry as an update

        self.db.refresh(operator)
        logger.info(f"[Account] Operator credential set: {mask_email(email)}")
        return operator

    def verify_credentials(self, email: str, password: str, kind: PrincipalKind) -> bool:
        account = self.get(kind, email)
        if account is None:
            # Keep timing identical whether or not the account exists
            verify_password(password, get_dummy_hash())
            return False
        return verify_password(password, account.password_hash)

    def mark_verified(self, verification_token: Optional[str], now: Optional[datetime] = None) -> int:
        """
        Mark the unverified member holding a fresh verification token as verified.

        Returns:
            Number of rows updated (0 or 1)
        """
        if not verification_token:
            return 0

        updated = (
            self.db.query(MemberAccount)
            .filter(
                MemberAccount.verification_token == verification_token,
                MemberAccount.verification_token_issued_at > freshness_cutoff(now),
                MemberAccount.verified == False,  # noqa: E712
            )
            .update({MemberAccount.verified: True}, synchronize_session=False)
        )
        self.db.commit()
        if updated:
            logger.info("[Account] Member e-mail verified")
        return updated
