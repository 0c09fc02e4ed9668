"""
Writing Assistant Module

AI actions (continue, rewrite, scene generation, summaries, editorial
analysis, coaching chat) and voice transcription.
"""

from .errors import (
    AIServiceError,
    RateLimitError,
    PaymentRequiredError,
    InvalidActionError,
    TranscriptionError,
)
from .prompts import build_prompts, available_actions, REWRITE_ACTIONS, EDITORIAL_ANALYSES
from .service import WriterService
from .transcription import TranscriptionService

__all__ = [
    "AIServiceError",
    "RateLimitError",
    "PaymentRequiredError",
    "InvalidActionError",
    "TranscriptionError",
    "build_prompts",
    "available_actions",
    "REWRITE_ACTIONS",
    "EDITORIAL_ANALYSES",
    "WriterService",
    "TranscriptionService",
]
