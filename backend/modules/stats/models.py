"""
Stats module data models.

One UserStats record exists per user. It references the user through
``user_id`` and is created when the user account is created.
"""

from pydantic import BaseModel, Field

INITIAL_AI_CREDITS = 240


class UserStats(BaseModel):
    """Per-user counters and AI credit balance."""

    user_id: str = Field(..., description="ID of the user these stats belong to")
    resume_created: int = Field(default=0, ge=0)
    application_tailored: int = Field(default=0, ge=0)
    application_tracked: int = Field(default=0, ge=0)
    ai_credits: int = Field(default=INITIAL_AI_CREDITS, ge=0)

    @classmethod
    def initial(cls, user_id: str) -> "UserStats":
        """Stats for a brand-new user."""
        return cls(user_id=user_id)
