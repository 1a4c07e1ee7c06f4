"""
Analysis module exceptions.

Messages are the exact client-facing bodies; identifiers only go into
``details`` so they stay in server logs.
"""

from shared.exceptions import ErrorKind, NotFoundError, ValidationError


class MalformedIdentifierError(ValidationError):
    """Raised when an analysis ID is not a 24-character hex string."""

    kind = ErrorKind.MALFORMED_IDENTIFIER

    def __init__(self, analysis_id: str):
        super().__init__(
            "Invalid ID format from URL",
            code="MALFORMED_IDENTIFIER",
            details={"analysis_id": analysis_id},
        )


class AnalysisNotFoundError(NotFoundError):
    """Raised when no analysis document matches the ID."""

    def __init__(self, analysis_id: str):
        super().__init__(
            "Analysis data not found in database.",
            code="ANALYSIS_NOT_FOUND",
            details={"analysis_id": analysis_id},
        )
