import os
import json
import logging
from pydantic_settings import BaseSettings
from pydantic import field_validator
from functools import lru_cache
from typing import Dict, Union

from webgate.constants import DEFAULT_EMAIL_TEMPLATES

logger = logging.getLogger(__name__)

_BACKEND_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _split_list(v):
    """Accept a JSON list, a comma-separated string or a list."""
    if isinstance(v, str):
        stripped = v.strip()
        if stripped.startswith("["):
            return [item.strip() for item in json.loads(stripped) if str(item).strip()]
        return [item.strip() for item in stripped.split(",") if item.strip()]
    return v


class Settings(BaseSettings):
    # Database
    # A full SQLAlchemy URL wins over the DB_* parts (e.g. sqlite:///webgate.db)
    DATABASE_URL: str = ""
    DB_HOST: str = "127.0.0.1"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_NAME: str = "webgate"
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    # HTTP server
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8080
    SERVER_PID_FILE: str = "webgate.pid"
    STATIC_DIR: str = os.path.join(_BACKEND_ROOT, "static")

    # Security
    BCRYPT_ROUNDS: int = 12
    # Proxies allowed to set X-Forwarded-For (IPs or CIDR ranges, comma separated)
    TRUSTED_PROXIES: Union[str, list[str]] = ["127.0.0.1", "::1"]

    @field_validator("TRUSTED_PROXIES", mode="before")
    @classmethod
    def parse_trusted_proxies(cls, v):
        return _split_list(v)

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_bcrypt_rounds(cls, v):
        """bcrypt only accepts a cost factor between 4 and 31"""
        if not 4 <= v <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return v

    # Environment
    ENVIRONMENT: str = "development"

    # CORS
    # Use comma-separated list: "https://site.example.com,https://admin.example.com"
    ALLOWED_ORIGINS: Union[str, list[str]] = ["http://localhost:8080"]

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def parse_allowed_origins(cls, v):
        """Parse ALLOWED_ORIGINS from string or list"""
        if isinstance(v, str) and v.strip() == "*":
            logger.warning(
                "CORS wildcard '*' enabled. Consider restricting for web apps."
            )
            return ["*"]
        return _split_list(v)

    # Email
    EMAIL_ENABLED: bool = False
    EMAIL_VERIFICATION_LINK_BASE: str = "http://localhost:8080/verify?token="
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_FROM: str = ""  # Falls back to SMTP_USERNAME
    SMTP_STARTTLS: bool = True
    SMTP_TIMEOUT: int = 10
    EMAIL_TEMPLATES: Dict[str, Dict[str, str]] = DEFAULT_EMAIL_TEMPLATES

    @field_validator("EMAIL_TEMPLATES")
    @classmethod
    def merge_email_templates(cls, v):
        """Overrides only need to name the templates they change"""
        merged = {name: dict(tpl) for name, tpl in DEFAULT_EMAIL_TEMPLATES.items()}
        for name, tpl in v.items():
            merged.setdefault(name, {}).update(tpl)
        return merged

    # Registration
    REGISTRATION_ADMIN_EMAILS: Union[str, list[str]] = []

    @field_validator("REGISTRATION_ADMIN_EMAILS", mode="before")
    @classmethod
    def parse_admin_emails(cls, v):
        """Parse operator notification addresses from string or list"""
        return _split_list(v)

    # Allow-list commands run after an accepted registration
    WHITELIST_JAVA_COMMAND: str = "/whitelist add {ign}"
    WHITELIST_BEDROCK_COMMAND: str = '/fwhitelist add "{ign}"'
    WHITELIST_HOOK: str = ""

    @field_validator("WHITELIST_JAVA_COMMAND", "WHITELIST_BEDROCK_COMMAND")
    @classmethod
    def validate_whitelist_command(cls, v):
        if "{ign}" not in v:
            raise ValueError("Allow-list command templates must contain {ign}")
        return v

    @property
    def smtp_sender(self) -> str:
        return self.SMTP_FROM or self.SMTP_USERNAME

    class Config:
        env_file = ".env"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
