"""Domain exceptions shared by services and routes.

Generation and parse failures are normally absorbed by the agents (see
``AgentResult``); the classes below are what services raise and what the
HTTP layer translates into status codes.
"""

from typing import Optional


class MarketplaceError(Exception):
    """Base class for all VendorGPT domain errors."""


class ExternalCapabilityError(MarketplaceError):
    """The text-generation capability failed or timed out."""


class ParseError(MarketplaceError):
    """Model output could not be parsed into the expected shape."""


class ValidationError(MarketplaceError):
    """Required fields are missing or out of range for an operation."""

    def __init__(self, message: str, fields: Optional[list[str]] = None):
        self.fields = fields or []
        super().__init__(message)


class NotFoundError(MarketplaceError):
    """A referenced document does not exist."""

    def __init__(self, collection: str, doc_id: str):
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"{collection}/{doc_id} not found")


class PermissionDeniedError(MarketplaceError):
    """The acting user does not own the document they tried to change."""


class ConflictError(MarketplaceError):
    """The document is no longer in the state the caller expected."""


class InvalidTransitionError(MarketplaceError):
    """Raised when a lifecycle state transition is not allowed."""

    def __init__(self, current_status: str, target_status: str, reason: str):
        self.current_status = current_status
        self.target_status = target_status
        self.reason = reason
        super().__init__(
            f"Invalid transition from {current_status} to {target_status}: {reason}"
        )


class StoreError(MarketplaceError):
    """The document store is unreachable or rejected the operation."""
