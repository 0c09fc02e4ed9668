"""
Scribe: backend and editor core for a novel-writing application.

Chapter editing with debounced autosave, chapter version snapshots,
story bible records and AI writing assistance.
"""

__version__ = "1.0.0"
