"""
Base Pydantic models for the agent-mcp framework.
"""

from datetime import datetime, timezone
from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseFrameworkModel(BaseModel):
    """
    Base model for all framework models with common configuration.
    """
    class Config:
        # Allow extra fields for maximum flexibility
        extra = "allow"
        # Use enum values instead of names
        use_enum_values = True
        # Validate assignment
        validate_assignment = True
        # Allow arbitrary types for maximum flexibility
        arbitrary_types_allowed = True
        # Populate by name for API compatibility (Pydantic V2)
        populate_by_name = True


class StrictFrameworkModel(BaseFrameworkModel):
    """
    Framework model that rejects unknown fields.

    Used for user-facing configuration where a typo should fail loudly.
    """
    class Config:
        extra = "forbid"


class TimestampedModel(BaseFrameworkModel):
    """
    Base model with automatic timestamp tracking.
    """
    created_at: datetime = Field(default_factory=_utcnow)
