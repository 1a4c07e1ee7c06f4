"""
Analysis module.

Read-only lookup of analysis documents produced by the tailoring pipeline.

Public API:
- IAnalysisService: Interface for analysis reads
- AnalysisService, AnalysisRepository
- is_valid_object_id
- MalformedIdentifierError, AnalysisNotFoundError
"""

from .interfaces import IAnalysisService
from .repository import AnalysisRepository, is_valid_object_id
from .service import AnalysisService
from .exceptions import MalformedIdentifierError, AnalysisNotFoundError

__all__ = [
    "IAnalysisService",
    "AnalysisService",
    "AnalysisRepository",
    "is_valid_object_id",
    "MalformedIdentifierError",
    "AnalysisNotFoundError",
]
