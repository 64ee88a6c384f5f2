"""
Outgoing mail for the contact form.

One message per submission, sent to the configured account with Reply-To set
to the visitor. Delivery errors are raised to the caller; there is no retry.
"""

import html
import logging
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional

import aiosmtplib

from portfolio_api.config.settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "Portfolio Contact"


@dataclass
class ContactMessage:
    email: str
    message: str
    name: Optional[str] = None
    subject: Optional[str] = None


def contact_text_body(contact: ContactMessage) -> str:
    return f"Name: {contact.name or 'Anonymous'}\nEmail: {contact.email}\n\n{contact.message}"


def contact_html_body(contact: ContactMessage) -> str:
    message_html = html.escape(contact.message or "").replace("\n", "<br>")
    return (
        f"<p><strong>Name:</strong> {html.escape(contact.name or 'Anonymous')}<br>"
        f"<strong>Email:</strong> {html.escape(contact.email or '')}</p>"
        f"<p>{message_html}</p>"
    )


def compose_contact_email(contact: ContactMessage, account: str) -> EmailMessage:
    """Build the message delivered to the site owner for one submission."""
    email_message = EmailMessage()
    email_message["From"] = account
    email_message["To"] = account
    if contact.email:
        email_message["Reply-To"] = contact.email
    email_message["Subject"] = contact.subject or DEFAULT_SUBJECT
    email_message.set_content(contact_text_body(contact))
    email_message.add_alternative(contact_html_body(contact), subtype="html")
    return email_message


class BaseMailer:
    """Base class for mail delivery (to be extended by specific implementations)"""

    account: Optional[str] = None

    async def send(self, email_message: EmailMessage) -> None:
        raise NotImplementedError

    async def send_contact(self, contact: ContactMessage) -> None:
        if not self.account:
            raise RuntimeError("Mail account is not configured")
        await self.send(compose_contact_email(contact, self.account))


class SmtpMailer(BaseMailer):
    """Sends mail through an authenticated SMTP account"""

    def __init__(
        self,
        hostname: str,
        port: int,
        username: Optional[str],
        password: Optional[str],
        start_tls: bool = True,
    ):
        self.hostname = hostname
        self.port = port
        self.account = username
        self.password = password
        self.start_tls = start_tls

    async def send(self, email_message: EmailMessage) -> None:
        logger.info("Sending mail to %s via %s:%s", email_message["To"], self.hostname, self.port)
        await aiosmtplib.send(
            email_message,
            hostname=self.hostname,
            port=self.port,
            username=self.account,
            password=self.password,
            start_tls=self.start_tls,
        )
        logger.info("Mail sent: %s", email_message["Subject"])

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmtpMailer":
        return cls(
            hostname=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.email_user,
            password=settings.email_pass,
            start_tls=settings.smtp_start_tls,
        )
