"""
Registration Request Schemas

Pydantic models for the /register and /users endpoints.
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from webgate.models.registration_request import RegistrationRequest, RegistrationStatus


class RegistrationCreate(BaseModel):
    """Membership request body; telegram is the only optional field"""
    ign: Optional[str] = Field(None, max_length=255, description="In-game name(s), 'Java[]Bedrock'")
    discord: Optional[str] = Field(None, max_length=255, description="Discord handle")
    telegram: Optional[str] = Field(None, max_length=255, description="Telegram handle")
    email: Optional[str] = Field(None, max_length=255, description="Contact e-mail")
    type: Optional[str] = Field(None, max_length=50, description="Membership category")

    @property
    def is_complete(self) -> bool:
        return all(
            value is not None and value.strip()
            for value in (self.ign, self.discord, self.email, self.type)
        )


class AcceptRequest(BaseModel):
    ign: Optional[str] = Field(None, max_length=255)
    acceptedBy: Optional[str] = Field(None, max_length=255)


class DenyRequest(BaseModel):
    ign: Optional[str] = Field(None, max_length=255)
    deniedBy: Optional[str] = Field(None, max_length=255)
    reason: Optional[str] = Field(None, max_length=2000)


class RegistrationEntry(BaseModel):
    """One row of the /users listing"""
    ign: str
    discord: str
    telegram: Optional[str] = None
    email: str
    type: str
    status: RegistrationStatus
    created_at: Optional[datetime] = None
    accepted_by: Optional[str] = None
    accepted_date: Optional[datetime] = None
    denied_by: Optional[str] = None
    denied_date: Optional[datetime] = None
    deny_reason: Optional[str] = None

    @classmethod
    def from_request(cls, request: RegistrationRequest) -> "RegistrationEntry":
        entry = cls(
            ign=request.ign,
            discord=request.discord,
            telegram=request.telegram,
            email=request.email,
            type=request.category,
            status=request.status,
            created_at=request.created_at,
        )
        if request.status == RegistrationStatus.ACCEPTED:
            entry.accepted_by = request.decided_by
            entry.accepted_date = request.decided_at
        elif request.status == RegistrationStatus.DENIED:
            entry.denied_by = request.decided_by
            entry.denied_date = request.decided_at
            entry.deny_reason = request.deny_reason
        return entry

    def to_public_dict(self) -> dict:
        """Decision fields only appear for decided requests"""
        data = self.model_dump(mode="json")
        return {
            key: value for key, value in data.items()
            if value is not None or key not in _DECISION_FIELDS
        }


_DECISION_FIELDS = frozenset(
    {"accepted_by", "accepted_date", "denied_by", "denied_date", "deny_reason"}
)


class RegistrationList(BaseModel):
    success: bool = True
    users: List[dict]


class MessageResponse(BaseModel):
    """Generic envelope"""
    success: bool
    message: str
