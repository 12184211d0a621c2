"""Exception hierarchy for claimlens."""

from __future__ import annotations


class ClaimLensError(Exception):
    """Base exception for all claimlens errors."""


class TextExtractionError(ClaimLensError):
    """Raised by a text extraction adapter when a page cannot be read.

    The pipeline absorbs this and classifies the page from empty text.
    """

    def __init__(self, message: str, path: str = "", media_type: str = "") -> None:
        super().__init__(message)
        self.path = path
        self.media_type = media_type


class PolicyUnavailableError(ClaimLensError):
    """Raised when the exclusion policy source cannot be loaded."""


class PersistenceError(ClaimLensError):
    """Raised when a claim repository operation fails."""


class ClaimNotFoundError(ClaimLensError, KeyError):
    """Raised when a claim id is not present in the repository."""

    def __init__(self, claim_id: str) -> None:
        super().__init__(f"Claim not found: {claim_id}")
        self.claim_id = claim_id

    def __str__(self) -> str:
        return f"Claim not found: {self.claim_id}"


class ClaimStateError(ClaimLensError):
    """Raised when an operation is not allowed in the claim's current status."""
