"""
Mail module exceptions.
"""

from typing import Optional

from shared.exceptions import ErrorKind, ExternalServiceError


class DeliveryFailedError(ExternalServiceError):
    """Raised when the relay rejects the message or cannot be reached."""

    kind = ErrorKind.DELIVERY_FAILED

    def __init__(self, reason: str, recipient: Optional[str] = None):
        super().__init__(
            "Unable to send sign-in email",
            service="smtp",
            code="DELIVERY_FAILED",
            details={"reason": reason, "recipient": recipient},
        )
