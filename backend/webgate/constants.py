"""
Application Constants
"""

# Tokens
TOKEN_LENGTH = 32  # Session and verification tokens
TOKEN_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
OPERATOR_PASSWORD_LENGTH = 16
OPERATOR_PASSWORD_ALPHABET = TOKEN_ALPHABET + "!@#$%^&*"
FRESHNESS_WINDOW_HOURS = 24  # Session and verification token lifetime

# Registration identifiers ("JavaName[]BedrockName")
IDENTIFIER_DELIMITER = "[]"
EMPTY_PLATFORM_HANDLE = "none"
CONSOLE_ACTOR = "Console"

# Content defaults
DEFAULT_CONTENT_PAGE = "index"
DEFAULT_CONTENT_LANGUAGE = "en"

# Verification redirect
VERIFICATION_RESULT_PAGE = "/login/verification-success.html"

# Direct operator e-mail
TEXT_EMAIL_SUBJECT = "This is a text email"

DEFAULT_EMAIL_TEMPLATES = {
    "verification": {
        "subject": "Verify your email address",
        "body": (
            "Hello {username},\n\n"
            "Please confirm your account by opening the link below within 24 hours:\n"
            "{verification_link}\n"
        ),
    },
    "registration": {
        "subject": "Registration received",
        "body": (
            "Hello {username},\n\n"
            "We received your registration for {ign} ({type}).\n"
            "Discord: {discord}\nTelegram: {telegram}\n\n"
            "An administrator will review it shortly.\n"
        ),
    },
    "admin_notification": {
        "subject": "New registration: {ign}",
        "body": (
            "A new registration is waiting for review.\n\n"
            "IGN: {ign}\nDiscord: {discord}\nTelegram: {telegram}\n"
            "Email: {email}\nType: {type}\n"
        ),
    },
    "acceptance": {
        "subject": "Registration accepted",
        "body": "Your registration for {ign} was accepted by {accepted_by}. Welcome!\n",
    },
    "denial": {
        "subject": "Registration denied",
        "body": "Your registration for {ign} was denied by {denied_by}.\nReason: {reason}\n",
    },
}
