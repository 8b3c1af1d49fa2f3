"""
Custom exceptions for the application.

Each exception carries a user-facing message only; internal error detail is
logged where it is caught and never placed in these messages.
"""
from typing import Optional


class FlashdeckException(Exception):
    """Base exception for all Flashdeck application exceptions."""
    kind = "Error"


class AuthenticationError(FlashdeckException):
    """Raised when no authenticated identity is available."""
    kind = "Unauthenticated"

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class InvalidInputError(FlashdeckException):
    """Raised when input fails shape or bounds validation."""
    kind = "InvalidInput"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class NotFoundOrDeniedError(FlashdeckException):
    """
    Raised when a resource does not exist or is owned by someone else.

    The two cases are deliberately indistinguishable to the caller.
    """
    kind = "NotFoundOrDenied"


class QuotaExceededError(FlashdeckException):
    """Raised when a plan quantity limit is reached."""
    kind = "QuotaExceeded"


class EntitlementRequiredError(FlashdeckException):
    """Raised when the caller's plan lacks a required feature."""
    kind = "EntitlementRequired"


class DescriptionRequiredError(FlashdeckException):
    """Raised when AI generation is requested for a deck without a description."""
    kind = "DescriptionRequired"


class GenerationFailedError(FlashdeckException):
    """Raised when the text-generation service fails or returns invalid data."""
    kind = "GenerationFailed"


class OperationTimeoutError(FlashdeckException):
    """Raised when a datastore or generation call exceeds its time limit."""
    kind = "Timeout"


class ActionFailedError(FlashdeckException):
    """Raised with a generic per-operation message when an unexpected failure occurs."""
    kind = "ActionFailed"
