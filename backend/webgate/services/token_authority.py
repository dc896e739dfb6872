"""
Token Authority

Issues and validates bearer tokens for operators and members.

A token is valid while the account row still stores it and its issue time
is inside the 24-hour freshness window. There is no revocation: issuing a
new token simply overwrites the stored value.
"""
import logging
from datetime import datetime
from typing import Optional, Union

from sqlalchemy.orm import Session

from webgate.models.accounts import (
    ACCOUNT_MODELS,
    MemberAccount,
    OperatorAccount,
    PrincipalKind,
)
from webgate.utils.masking import mask_email
from webgate.utils.tokens import freshness_cutoff, generate_secure_token, utcnow

logger = logging.getLogger(__name__)

Account = Union[OperatorAccount, MemberAccount]


class TokenAuthority:
    def __init__(self, db: Session) -> None:
        self.db = db

    def issue(self, kind: PrincipalKind, email: str, now: Optional[datetime] = None) -> Optional[str]:
        """
        Generate a session token for an account and store it with the issue time.

        Args:
            kind: Principal kind owning the account
            email: Account e-mail
            now: Issue time (defaults to the current UTC time)

        Returns:
            The new token, or None when the account does not exist
        """
        model = ACCOUNT_MODELS[kind]
        issued_at = now or utcnow()
        token = generate_secure_token()

        updated = (
            self.db.query(model)
            .filter(model.email == email)
            .update(
                {
                    model.session_token: token,
                    model.session_token_issued_at: issued_at,
                    model.last_login: issued_at,
                },
                synchronize_session=False,
            )
        )
        if not updated:
            self.db.rollback()
            return None

        self.db.commit()
        logger.info(f"[Token] Issued {kind.value} token for {mask_email(email)}")
        return token

    def authenticate(
        self, token: Optional[str], kind: PrincipalKind, now: Optional[datetime] = None
    ) -> Optional[Account]:
        """
        Resolve a token to its account.

        Members must additionally be verified. An unknown token and an
        expired one are indistinguishable to the caller.
        """
        if not token:
            return None

        model = ACCOUNT_MODELS[kind]
        query = self.db.query(model).filter(
            model.session_token == token,
            model.session_token_issued_at > freshness_cutoff(now),
        )
        if kind == PrincipalKind.MEMBER:
            query = query.filter(MemberAccount.verified == True)  # noqa: E712
        return query.first()

    def verify(self, token: Optional[str], kind: PrincipalKind, now: Optional[datetime] = None) -> bool:
        return self.authenticate(token, kind, now) is not None

    def verify_any(self, token: Optional[str], now: Optional[datetime] = None) -> Optional[PrincipalKind]:
        """Operators are checked first, then verified members."""
        for kind in (PrincipalKind.OPERATOR, PrincipalKind.MEMBER):
            if self.verify(token, kind, now):
                return kind
        return None
