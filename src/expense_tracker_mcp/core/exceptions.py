"""
Custom exceptions for the expense tracker MCP server.
"""


class ExpenseTrackerError(Exception):
    """Base exception for expense tracker errors."""
    pass


class LedgerNotFoundError(ExpenseTrackerError):
    """Raised when the ledger file cannot be found."""
    pass


class DecodeError(ExpenseTrackerError):
    """Raised when ledger data cannot be decoded."""
    pass


class UserNotFoundError(ExpenseTrackerError):
    """Raised when a user id is not present in the ledger."""
    pass


class AccessDeniedError(ExpenseTrackerError):
    """Raised when a viewer may not see or change another user's data."""
    pass


class WorkflowError(ExpenseTrackerError):
    """Base exception for relationship request workflow violations."""
    pass


class InvalidRequestError(WorkflowError):
    """Raised when a request pairs the wrong roles or targets the sender."""
    pass


class RequestNotFoundError(WorkflowError):
    pass


class RequestAlreadyProcessedError(WorkflowError):
    """Raised when approving or rejecting a request that is no longer pending."""
    pass


class DuplicateRequestError(WorkflowError):
    """Raised when a pending request already exists for the same pair."""
    pass


class RelationshipExistsError(WorkflowError):
    """Raised when the user already has an accountant."""
    pass


class RelationshipNotFoundError(WorkflowError):
    pass
