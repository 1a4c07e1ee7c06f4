"""
ResumeTailor API package.

Provides the FastAPI application for the ResumeTailor backend.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
