"""
Category model for expense tracker data.
"""

from typing import Optional

from pydantic import BaseModel, Field


class Category(BaseModel):
    """Represents a user-defined expense category."""

    model_config = {"frozen": True, "populate_by_name": True, "str_strip_whitespace": True}

    # Required fields
    category_id: int
    name: str = Field(min_length=1, max_length=100)

    # Display
    color: str = Field(default="#667eea", pattern=r"^#[0-9a-fA-F]{6}$")

    # Optional fields
    description: Optional[str] = None
    user_id: Optional[int] = None
