# app/mailer.py
"""Verification email delivery.

SMTP via aiosmtplib when ``SMTP_HOST`` is configured; otherwise the message is
written to the log so local setups can still complete the sign-up flow.
"""

from abc import ABC, abstractmethod
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
import logging

import aiosmtplib

from app import config

logger = logging.getLogger(__name__)


def verification_url(token: str) -> str:
    return f"{config.APP_BASE_URL.rstrip('/')}/api/auth/verify-email?token={token}"


def render_verification_email(username: str, url: str) -> tuple:
    """Returns (subject, text_body, html_body)."""
    subject = "Verify Your Email - HARE KRISHNA Game"
    text = (
        f"Welcome to HARE KRISHNA Game!\n\n"
        f"Hello {username},\n\n"
        f"To complete your registration and set your password, please visit:\n"
        f"{url}\n\n"
        f"This link will expire in {config.EMAIL_TOKEN_TTL_HOURS} hours.\n\n"
        f"If you didn't create this account, please ignore this email.\n\n"
        f"Hare Krishna!\nThe HARE KRISHNA Game Team\n"
    )
    html = (
        f"<h2>Welcome to HARE KRISHNA Game!</h2>"
        f"<p>Hello <strong>{username}</strong>,</p>"
        f"<p>To complete your registration, click the link below to set your password:</p>"
        f'<p><a href="{url}">Set Your Password</a></p>'
        f"<p>This link will expire in {config.EMAIL_TOKEN_TTL_HOURS} hours.</p>"
        f"<p>Hare Krishna!<br>The HARE KRISHNA Game Team</p>"
    )
    return subject, text, html


class EmailSender(ABC):
    @abstractmethod
    async def send(self, to_email: str, subject: str, text_body: str, html_body: str) -> bool:
        """Deliver one message. Returns True on success, never raises."""

    async def send_verification(self, email: str, username: str, token: str) -> bool:
        subject, text, html = render_verification_email(username, verification_url(token))
        return await self.send(email, subject, text, html)


class SmtpEmailSender(EmailSender):
    def __init__(self, host: str, port: int, username: str, password: str, from_address: str):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_address = from_address

    async def send(self, to_email: str, subject: str, text_body: str, html_body: str) -> bool:
        msg = MIMEMultipart("alternative")
        msg["From"] = self.from_address
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.attach(MIMEText(text_body, "plain", "utf-8"))
        msg.attach(MIMEText(html_body, "html", "utf-8"))

        try:
            await aiosmtplib.send(
                msg,
                hostname=self.host,
                port=self.port,
                username=self.username or None,
                password=self.password or None,
                start_tls=True,
            )
            logger.info(f"Verification email sent to {to_email}")
            return True
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            return False


class LoggingEmailSender(EmailSender):
    def __init__(self):
        self.outbox = []

    async def send(self, to_email: str, subject: str, text_body: str, html_body: str) -> bool:
        self.outbox.append({"to": to_email, "subject": subject, "text": text_body})
        logger.info(f"SMTP not configured; email to {to_email}:\n{text_body}")
        return True


def build_email_sender() -> EmailSender:
    if config.SMTP_HOST:
        return SmtpEmailSender(
            config.SMTP_HOST,
            config.SMTP_PORT,
            config.SMTP_USERNAME,
            config.SMTP_PASSWORD,
            config.EMAIL_FROM,
        )
    return LoggingEmailSender()
