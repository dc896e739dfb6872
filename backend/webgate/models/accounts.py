"""
Account Models

Member accounts (self sign-up, e-mail verified) and operator accounts
(created from the CLI). Each row holds the most recently issued session
token; validity is judged only by its issue time.
"""
from sqlalchemy import Column, Integer, String, Boolean, TIMESTAMP
from sqlalchemy.sql import func
from webgate.database import Base
import enum


class PrincipalKind(str, enum.Enum):
    """Authenticated actor classes"""
    OPERATOR = "operator"
    MEMBER = "member"


class MemberAccount(Base):
    """Member account table"""
    __tablename__ = "member_accounts"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    verification_token = Column(String(64), nullable=True, index=True)
    verification_token_issued_at = Column(TIMESTAMP, nullable=True)
    verified = Column(Boolean, default=False, nullable=False)
    session_token = Column(String(64), nullable=True, index=True)
    session_token_issued_at = Column(TIMESTAMP, nullable=True)
    created_at = Column(TIMESTAMP, server_default=func.current_timestamp())
    last_login = Column(TIMESTAMP, nullable=True)


class OperatorAccount(Base):
    """Operator account table"""
    __tablename__ = "operator_accounts"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    session_token = Column(String(64), nullable=True, index=True)
    session_token_issued_at = Column(TIMESTAMP, nullable=True)
    created_at = Column(TIMESTAMP, server_default=func.current_timestamp())
    updated_at = Column(
        TIMESTAMP,
        server_default=func.current_timestamp(),
        onupdate=func.current_timestamp()
    )
    last_login = Column(TIMESTAMP, nullable=True)


ACCOUNT_MODELS = {
    PrincipalKind.OPERATOR: OperatorAccount,
    PrincipalKind.MEMBER: MemberAccount,
}
