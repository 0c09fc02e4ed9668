"""
Editor core: chapter state, debounced autosave and the editing session.
"""

from .models import Chapter, ChapterMetadata, ChapterStatus
from .document import DocumentStore, DocumentEvent
from .autosave import AutosaveScheduler, Debouncer
from .session import EditorSession
from .text import html_to_text, count_words

__all__ = [
    "Chapter",
    "ChapterMetadata",
    "ChapterStatus",
    "DocumentStore",
    "DocumentEvent",
    "AutosaveScheduler",
    "Debouncer",
    "EditorSession",
    "html_to_text",
    "count_words",
]
