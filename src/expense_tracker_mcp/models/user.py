"""
User model for expense tracker data.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, computed_field


class Role(str, Enum):
    """Access role of a user."""

    USER = "USER"
    ACCOUNTANT = "ACCOUNTANT"
    ADMIN = "ADMIN"


class User(BaseModel):
    """Represents a registered user of the expense tracker."""

    model_config = {"frozen": True, "populate_by_name": True}

    # Required fields
    user_id: int
    username: str

    # Profile
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None

    role: Role = Role.USER

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_name(self) -> str:
        """Full name when known, otherwise the username."""
        full_name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return full_name or self.username
