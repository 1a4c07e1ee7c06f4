"""
Analysis module interface.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class IAnalysisService(Protocol):
    """Contract for reading stored analysis documents."""

    async def get_analysis(self, analysis_id: str) -> dict[str, Any]:
        """
        Fetch an analysis document.

        Args:
            analysis_id: Identifier taken from the request path

        Returns:
            The stored document, unchanged

        Raises:
            MalformedIdentifierError: ID is not 24 hex characters (no query is made)
            AnalysisNotFoundError: No document has this ID
            InternalError: The database call failed
        """
        ...
