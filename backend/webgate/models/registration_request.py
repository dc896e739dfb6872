"""
Registration Request Model

Membership requests waiting for an operator decision.
"""
from sqlalchemy import Column, Integer, String, Enum, TIMESTAMP, Text
from sqlalchemy.sql import func
from webgate.database import Base
import enum


class RegistrationStatus(str, enum.Enum):
    """Request status; accepted and denied are terminal"""
    PENDING = "pending"
    ACCEPTED = "accepted"
    DENIED = "denied"


class RegistrationRequest(Base):
    """Registration request table"""
    __tablename__ = "registration_requests"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    ign = Column(String(255), nullable=False, index=True)  # "JavaName" or "JavaName[]BedrockName"
    discord = Column(String(255), nullable=False, index=True)
    telegram = Column(String(255), nullable=True)
    email = Column(String(255), nullable=False, index=True)
    category = Column("type", String(50), nullable=False)
    status = Column(
        Enum(RegistrationStatus, values_callable=lambda x: [e.value for e in x]),
        default=RegistrationStatus.PENDING,
        nullable=False,
        index=True
    )
    decided_by = Column(String(255), nullable=True)
    decided_at = Column(TIMESTAMP, nullable=True)
    deny_reason = Column(Text, nullable=True)
    created_at = Column(TIMESTAMP, server_default=func.current_timestamp())
