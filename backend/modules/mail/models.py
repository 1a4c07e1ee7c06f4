"""
Mail module data models.
"""

from typing import Optional
from pydantic import BaseModel, Field

from shared.config import Settings
from shared.exceptions import ConfigurationMissingError


class MailMessage(BaseModel):
    """A fully composed message, ready for delivery."""

    to: str = Field(..., description="Recipient address")
    sender: str = Field(..., description="From address")
    subject: str = Field(..., description="Subject line")
    text: str = Field(..., description="Plain-text rendering")
    html: str = Field(..., description="HTML rendering")

    model_config = {"frozen": True}


class SMTPConfig(BaseModel):
    """Mail relay connection settings, resolved once at startup."""

    host: str
    port: int
    username: str
    password: str
    sender: str
    use_tls: bool = True
    timeout: float = Field(default=10.0, gt=0, description="Socket timeout in seconds")

    model_config = {"frozen": True}

    @classmethod
    def from_settings(cls, settings: Settings) -> "SMTPConfig":
        """
        Build the relay config from application settings.

        Raises:
            ConfigurationMissingError: If any relay value is unset
        """
        values: dict[str, Optional[object]] = {
            "EMAIL_SERVER_HOST": settings.email_server_host,
            "EMAIL_SERVER_PORT": settings.email_server_port,
            "EMAIL_SERVER_USER": settings.email_server_user,
            "EMAIL_SERVER_PASSWORD": settings.email_server_password,
            "EMAIL_FROM": settings.email_from,
        }
        missing = [name for name, value in values.items() if value in (None, "")]
        if missing:
            raise ConfigurationMissingError(missing)

        return cls(
            host=settings.email_server_host,
            port=settings.email_server_port,
            username=settings.email_server_user,
            password=settings.email_server_password,
            sender=settings.email_from,
            use_tls=settings.email_use_tls,
            timeout=settings.email_timeout_seconds,
        )
