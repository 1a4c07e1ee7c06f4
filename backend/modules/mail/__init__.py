"""
Mail module.

Composes and delivers the sign-in email.

Public API:
- IMailer: Interface for message delivery
- SMTPMailer: Relay-backed implementation
- compose_sign_in_message: Builds the HTML + plain-text message
- DeliveryFailedError
"""

from .interfaces import IMailer
from .models import MailMessage, SMTPConfig
from .service import SMTPMailer
from .templates import compose_sign_in_message, render_html, render_text
from .exceptions import DeliveryFailedError

__all__ = [
    # Interface
    "IMailer",
    # Implementation
    "SMTPMailer",
    # Models
    "MailMessage",
    "SMTPConfig",
    # Rendering
    "compose_sign_in_message",
    "render_html",
    "render_text",
    # Exceptions
    "DeliveryFailedError",
]
