"""
Accountant/user relationship models.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class RequestStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class InitiatorType(str, Enum):
    """Which side of the relationship sent the request."""

    ACCOUNTANT = "ACCOUNTANT"
    USER = "USER"


class AccountantRequest(BaseModel):
    """
    A request to link a user with an accountant.

    Requests start PENDING and move to APPROVED or REJECTED exactly once.
    """

    model_config = {"frozen": True, "populate_by_name": True}

    request_id: int
    accountant_id: int
    user_id: int
    status: RequestStatus = RequestStatus.PENDING
    initiator: InitiatorType
    created_at: datetime


class AccountantUserRelationship(BaseModel):
    """An active link: the accountant may view the user's finances."""

    model_config = {"frozen": True, "populate_by_name": True}

    accountant_id: int
    user_id: int
    created_at: datetime
