"""
Notifier

Templated e-mail over SMTP. Delivery is best effort: callers schedule
``deliver``/``deliver_template`` after their transaction has committed, and
any failure is logged and dropped.
"""
import logging
import re
import smtplib
from email.message import EmailMessage
from typing import Any, Iterable, Mapping, Optional

from webgate.configuration import Settings, get_settings
from webgate.utils.masking import mask_email

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


class NotifierError(Exception):
    """Raised when a message cannot be rendered or handed to the SMTP server."""


def render_template(text: str, data: Mapping[str, Any]) -> str:
    """Replace ``{key}`` with ``data[key]``; None becomes "N/A", unknown keys are left as-is."""
    def _substitute(match):
        key = match.group(1)
        if key not in data:
            return match.group(0)
        value = data[key]
        return "N/A" if value is None else str(value)

    return _PLACEHOLDER_RE.sub(_substitute, text)


class Notifier:
    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()

    @property
    def enabled(self) -> bool:
        return self.settings.EMAIL_ENABLED

    def send(self, to: str, subject: str, body: str) -> bool:
        """
        Send a plain-text message.

        Returns:
            False when e-mail is disabled, True once the server accepted it

        Raises:
            NotifierError: header text with line breaks, or an SMTP connection,
                authentication or delivery failure
        """
        if not self.enabled:
            logger.info(f"[Email] Disabled; skipping '{subject}' to {mask_email(to)}")
            return False

        try:
            # Header values containing CR or LF raise ValueError
            message = EmailMessage()
            message["From"] = self.settings.smtp_sender
            message["To"] = to
            message["Subject"] = subject
            message.set_content(body)

            with smtplib.SMTP(
                self.settings.SMTP_HOST,
                self.settings.SMTP_PORT,
                timeout=self.settings.SMTP_TIMEOUT,
            ) as smtp:
                if self.settings.SMTP_STARTTLS:
                    smtp.starttls()
                if self.settings.SMTP_USERNAME:
                    smtp.login(self.settings.SMTP_USERNAME, self.settings.SMTP_PASSWORD)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError, ValueError) as e:
            raise NotifierError(f"Failed to send '{subject}' to {mask_email(to)}: {e}") from e

        logger.info(f"[Email] Sent '{subject}' to {mask_email(to)}")
        return True

    def send_template(self, to: str, template: str, data: Mapping[str, Any]) -> bool:
        templates = self.settings.EMAIL_TEMPLATES
        if template not in templates:
            raise NotifierError(f"Unknown email template: {template}")

        tpl = templates[template]
        subject = render_template(tpl.get("subject", "No Subject"), data)
        body = render_template(tpl.get("body", "No Body"), data)
        return self.send(to, subject, body)

    def deliver(self, to: str, subject: str, body: str) -> bool:
        """Fire-and-forget variant of ``send``."""
        try:
            return self.send(to, subject, body)
        except NotifierError as e:
            logger.error(f"[Email] {e}")
            return False

    def deliver_template(self, to: str, template: str, data: Mapping[str, Any]) -> bool:
        """Fire-and-forget variant of ``send_template``."""
        try:
            return self.send_template(to, template, data)
        except NotifierError as e:
            logger.error(f"[Email] Template '{template}': {e}")
            return False

    def deliver_fanout(self, recipients: Iterable[str], template: str, data: Mapping[str, Any]) -> int:
        """Send one template to several addresses; returns how many were sent."""
        return sum(1 for to in recipients if self.deliver_template(to, template, data))


def get_notifier() -> Notifier:
    """FastAPI dependency; overridden in tests."""
    return Notifier()
