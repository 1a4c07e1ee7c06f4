"""
SMTP mail dispatcher.

Opens a fresh relay connection per message; nothing is pooled.
"""

import asyncio
import logging
import smtplib
from email.message import EmailMessage

from .exceptions import DeliveryFailedError
from .interfaces import IMailer
from .models import MailMessage, SMTPConfig

logger = logging.getLogger(__name__)

SMTP_SSL_PORT = 465


def build_email(message: MailMessage) -> EmailMessage:
    """Build a multipart/alternative message with text and HTML parts."""
    email = EmailMessage()
    email["Subject"] = message.subject
    email["From"] = message.sender
    email["To"] = message.to
    email.set_content(message.text)
    email.add_alternative(message.html, subtype="html")
    return email


class SMTPMailer(IMailer):
    """Delivers messages through an authenticated SMTP relay."""

    def __init__(self, config: SMTPConfig):
        self._config = config

    @property
    def config(self) -> SMTPConfig:
        return self._config

    def _connect(self) -> smtplib.SMTP:
        config = self._config
        if config.port == SMTP_SSL_PORT:
            return smtplib.SMTP_SSL(config.host, config.port, timeout=config.timeout)
        return smtplib.SMTP(config.host, config.port, timeout=config.timeout)

    def _send_sync(self, email: EmailMessage) -> None:
        config = self._config
        with self._connect() as server:
            # Inside the block so a failed handshake still closes the socket
            if config.port != SMTP_SSL_PORT and config.use_tls:
                server.starttls()
            server.login(config.username, config.password)
            server.send_message(email)

    async def send(self, message: MailMessage) -> None:
        """Send the message, raising DeliveryFailedError on any relay failure."""
        email = build_email(message)
        try:
            await asyncio.to_thread(self._send_sync, email)
        except smtplib.SMTPAuthenticationError as e:
            logger.exception("SMTP auth failed for %s", self._config.username)
            raise DeliveryFailedError(f"authentication failed: {e}", message.to) from e
        except TimeoutError as e:
            logger.exception("SMTP timeout for host %s", self._config.host)
            raise DeliveryFailedError("connection timed out", message.to) from e
        except smtplib.SMTPException as e:
            logger.exception("SMTP error while sending email to %s", message.to)
            raise DeliveryFailedError(f"relay rejected the message: {e}", message.to) from e
        except OSError as e:
            logger.exception("SMTP network error while sending email to %s", message.to)
            raise DeliveryFailedError(f"network error: {e}", message.to) from e

        logger.info("Sign-in email sent to %s", message.to)
