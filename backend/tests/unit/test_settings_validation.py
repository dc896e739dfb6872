import pytest
from pydantic import ValidationError

from webgate.configuration import Settings
from webgate.constants import DEFAULT_EMAIL_TEMPLATES


def test_bcrypt_rounds_out_of_range_rejected():
    with pytest.raises(ValidationError):
        Settings(BCRYPT_ROUNDS=3)

    with pytest.raises(ValidationError):
        Settings(BCRYPT_ROUNDS=32)


def test_comma_separated_lists_are_split():
    settings = Settings(
        TRUSTED_PROXIES="10.0.0.1, 192.0.2.0/24",
        REGISTRATION_ADMIN_EMAILS="ops@example.com,,mod@example.com ",
    )

    assert settings.TRUSTED_PROXIES == ["10.0.0.1", "192.0.2.0/24"]
    assert settings.REGISTRATION_ADMIN_EMAILS == ["ops@example.com", "mod@example.com"]


def test_json_list_is_accepted():
    settings = Settings(ALLOWED_ORIGINS='["https://a.example.com", "https://b.example.com"]')

    assert settings.ALLOWED_ORIGINS == ["https://a.example.com", "https://b.example.com"]


def test_cors_wildcard():
    assert Settings(ALLOWED_ORIGINS="*").ALLOWED_ORIGINS == ["*"]


def test_email_template_override_keeps_defaults():
    settings = Settings(EMAIL_TEMPLATES={"denial": {"subject": "Sorry, {ign}"}})

    assert settings.EMAIL_TEMPLATES["denial"]["subject"] == "Sorry, {ign}"
    assert settings.EMAIL_TEMPLATES["denial"]["body"] == DEFAULT_EMAIL_TEMPLATES["denial"]["body"]
    assert set(DEFAULT_EMAIL_TEMPLATES) <= set(settings.EMAIL_TEMPLATES)


def test_whitelist_command_requires_placeholder():
    with pytest.raises(ValidationError):
        Settings(WHITELIST_JAVA_COMMAND="/whitelist add")


def test_smtp_sender_falls_back_to_username():
    assert Settings(SMTP_USERNAME="bot@example.com").smtp_sender == "bot@example.com"
    assert (
        Settings(SMTP_USERNAME="bot@example.com", SMTP_FROM="noreply@example.com").smtp_sender
        == "noreply@example.com"
    )
