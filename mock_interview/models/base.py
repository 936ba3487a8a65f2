"""Base model classes for the Mock Interview system."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel as PydanticBaseModel, Field


class BaseModel(PydanticBaseModel):
    """Base model with common functionality."""

    class Config:
        """Pydantic configuration."""
        use_enum_values = False
        # Persisted records use camelCase aliases; code uses field names
        populate_by_name = True
        validate_assignment = True


class TimestampedModel(BaseModel):
    """Base model with timestamp fields."""

    created_at: datetime = Field(default_factory=datetime.now, alias="createdAt", description="Creation timestamp")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt", description="Last update timestamp")

    def update_timestamp(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = datetime.now()
