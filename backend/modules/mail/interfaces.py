"""
Mail module interface.

The auth module depends on IMailer, not on SMTP, so tests can capture
outgoing messages instead of delivering them.
"""

from typing import Protocol, runtime_checkable

from .models import MailMessage


@runtime_checkable
class IMailer(Protocol):
    """Interface for delivering composed messages."""

    async def send(self, message: MailMessage) -> None:
        """
        Deliver a message.

        Args:
            message: Composed message with both renderings

        Raises:
            DeliveryFailedError: If the relay rejects or is unreachable
        """
        ...
