"""
Email service module for delivering digest emails.

This module provides the MailTransport protocol the dispatcher depends on and
EmailService, its SMTP implementation.
"""

import smtplib
import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Protocol

logger = logging.getLogger(__name__)


class MailTransport(Protocol):
    """Anything that can deliver one HTML message; raises on failure."""

    def send(self, recipient: str, subject: str, html: str) -> None:
        """Sends one message."""


class EmailService(MailTransport):
    """Service for sending emails via SMTP with STARTTLS."""

    def __init__(
        self,
        smtp_server: str,
        smtp_port: int,
        sender_email: str,
        sender_password: str,
        sender_name: str = "Briefly News",
        timeout: float = 30,
    ):
        self.smtp_server = smtp_server
        self.smtp_port = smtp_port
        self.sender_email = sender_email
        self.sender_password = sender_password
        self.sender_name = sender_name
        self.timeout = timeout

    def build_message(self, recipient: str, subject: str, html: str) -> MIMEMultipart:
        msg = MIMEMultipart()
        msg["From"] = formataddr((self.sender_name, self.sender_email))
        msg["To"] = recipient
        msg["Subject"] = subject
        msg.attach(MIMEText(html, "html", "utf-8"))
        return msg

    def send(self, recipient: str, subject: str, html: str) -> None:
        """Sends one message. SMTP errors propagate to the caller."""
        msg = self.build_message(recipient, subject, html)
        server = smtplib.SMTP(self.smtp_server, self.smtp_port, timeout=self.timeout)
        try:
            server.starttls()
            server.login(self.sender_email, self.sender_password)
            server.send_message(msg)
        finally:
            try:
                server.quit()
            except (smtplib.SMTPException, OSError):
                pass
        logger.debug("SMTP accepted message for %s.", recipient)
