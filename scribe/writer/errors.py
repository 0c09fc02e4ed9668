"""
Writing assistant errors.

Each error carries the HTTP status the writer endpoint answers with, and a
message that is safe to show to the author.
"""

from typing import Optional


class AIServiceError(Exception):
    """Generic AI failure (gateway error, missing configuration)."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class RateLimitError(AIServiceError):
    """The gateway answered 429."""

    status_code = 429

    def __init__(self, message: str = "Rate limit exceeded. Please try again in a moment."):
        super().__init__(message)


class PaymentRequiredError(AIServiceError):
    """The gateway answered 402."""

    status_code = 402

    def __init__(self, message: str = "Payment required. Please add credits to continue."):
        super().__init__(message)


class InvalidActionError(AIServiceError):
    """The action tag has no prompt template."""

    status_code = 400


class TranscriptionError(AIServiceError):
    """Speech-to-text failed or returned nothing."""
