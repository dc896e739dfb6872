from pydantic import BaseModel, Field, field_validator
from typing import Optional


class CredentialsRequest(BaseModel):
    """Signup / login body. Presence is checked by the route so it can answer 400."""
    email: Optional[str] = Field(None, max_length=255, description="Account e-mail")
    password: Optional[str] = Field(None, max_length=128, description="Password")

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        """Accounts are keyed by the lower-cased address (same as `webgate alogin`)"""
        return v.strip().lower() if v is not None else v

    @property
    def is_complete(self) -> bool:
        return bool(self.email) and bool(self.password)


class LoginResponse(BaseModel):
    """Member login response"""
    success: bool = True
    token: str
    email: str


class AdminLoginResponse(LoginResponse):
    """Operator login response"""
    isAdmin: bool = True


class TokenCheckResponse(BaseModel):
    success: bool = True
    principal: str
