"""
Document Store

In-memory state of one open manuscript: the ordered chapter list, the
active chapter and the edit buffer the author is typing into.

The buffer is separate from the chapter list. Typing only
changes the buffer; the autosave scheduler later commits it into the list.
Listeners are told about every change so the scheduler can arm its timers.
"""

from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Any

from .models import Chapter, ChapterMetadata
from .text import count_words


class DocumentEvent(str, Enum):
    BUFFER_CHANGED = "buffer_changed"
    CHAPTERS_CHANGED = "chapters_changed"
    CHAPTER_SELECTED = "chapter_selected"
    CHAPTERS_REPLACED = "chapters_replaced"


Listener = Callable[[DocumentEvent], None]


class DocumentStore:
    """
    Usage:
        store = DocumentStore(chapters)
        store.subscribe(listener)
        store.update_buffer("<p>It was a dark night</p>")
    """

    def __init__(self, chapters: Optional[Iterable[Chapter | Dict[str, Any]]] = None):
        self._chapters: List[Chapter] = []
        self._listeners: List[Listener] = []
        self._next_id = 1
        self.active_chapter_id: Optional[str] = None
        self.buffer: str = ""
        self.load(chapters or [Chapter(id="1", title="Chapter 1")])

    # =========================================================================
    # Observation
    # =========================================================================

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _emit(self, event: DocumentEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    # =========================================================================
    # Reads
    # =========================================================================

    @property
    def chapters(self) -> List[Chapter]:
        """Copy of the chapter list in authorial order."""
        return [chapter.model_copy(deep=True) for chapter in self._chapters]

    def chapter_records(self) -> List[Dict[str, Any]]:
        """Chapter list as JSON-ready dicts, for persistence."""
        return [chapter.to_record() for chapter in self._chapters]

    def get_chapter(self, chapter_id: str) -> Optional[Chapter]:
        index = self._index_of(chapter_id)
        return self._chapters[index].model_copy(deep=True) if index is not None else None

    @property
    def active_chapter(self) -> Optional[Chapter]:
        return self.get_chapter(self.active_chapter_id) if self.active_chapter_id else None

    def search(self, query: str) -> List[Chapter]:
        """Chapters whose title or content contains the query, case-insensitively."""
        needle = query.lower()
        return [
            chapter.model_copy(deep=True)
            for chapter in self._chapters
            if needle in chapter.title.lower() or needle in chapter.content.lower()
        ]

    def chapter_word_count(self) -> int:
        active = self.active_chapter
        return count_words(active.content) if active else 0

    def total_word_count(self) -> int:
        return sum(count_words(chapter.content) for chapter in self._chapters)

    def _index_of(self, chapter_id: Optional[str]) -> Optional[int]:
        for index, chapter in enumerate(self._chapters):
            if chapter.id == chapter_id:
                return index
        return None

    # =========================================================================
    # Loading
    # =========================================================================

    def load(self, chapters: Iterable[Chapter | Dict[str, Any]]) -> None:
        """
        Replace all state with chapters read from the remote record.

        Not reported as a chapter-list change: freshly loaded content does not
        need saving back.
        """
        self._set_chapters(chapters)
        self._select_first()

    def replace_chapters(self, chapters: Iterable[Chapter | Dict[str, Any]]) -> None:
        """Swap in a different chapter list (e.g. a loaded draft)."""
        self._set_chapters(chapters)
        self._select_first()
        self._emit(DocumentEvent.CHAPTERS_REPLACED)

    def _set_chapters(self, chapters: Iterable[Chapter | Dict[str, Any]]) -> None:
        self._chapters = [
            c.model_copy(deep=True) if isinstance(c, Chapter) else Chapter.from_record(c)
            for c in chapters
        ]
        if not self._chapters:
            self._chapters = [Chapter(id="1", title="Chapter 1")]
        numeric = [int(c.id) for c in self._chapters if c.id.isdigit()]
        self._next_id = max(numeric + [len(self._chapters)]) + 1

    def _select_first(self) -> None:
        first = self._chapters[0]
        self.active_chapter_id = first.id
        self.buffer = first.content

    # =========================================================================
    # Active chapter and buffer
    # =========================================================================

    def select_chapter(self, chapter_id: str) -> bool:
        """
        Make a chapter active and load its content into the buffer.

        Returns False and changes nothing when the id is unknown.
        """
        index = self._index_of(chapter_id)
        if index is None:
            return False
        self.active_chapter_id = chapter_id
        self.buffer = self._chapters[index].content
        self._emit(DocumentEvent.CHAPTER_SELECTED)
        return True

    def update_buffer(self, text: str) -> None:
        """Replace the edit buffer. The chapter list is committed later."""
        self.buffer = text
        self._emit(DocumentEvent.BUFFER_CHANGED)

    # =========================================================================
    # Chapter list mutations
    # =========================================================================

    def commit_content(self, chapter_id: str, content: str) -> bool:
        """Write content into a chapter of the list."""
        index = self._index_of(chapter_id)
        if index is None:
            return False
        self._chapters[index].content = content
        self._emit(DocumentEvent.CHAPTERS_CHANGED)
        return True

    def add_chapter(self, title: Optional[str] = None) -> Chapter:
        """
        Append an empty chapter and make it active.

        Ids come from a counter that only moves forward, so an id freed by a
        delete is never handed out again.
        """
        chapter_id = str(self._next_id)
        self._next_id += 1
        chapter = Chapter(id=chapter_id, title=title or f"Chapter {len(self._chapters) + 1}")
        self._chapters.append(chapter)
        self.active_chapter_id = chapter.id
        self.buffer = chapter.content
        self._emit(DocumentEvent.CHAPTERS_CHANGED)
        return chapter.model_copy(deep=True)

    def reorder_chapters(self, from_id: str, to_id: str) -> bool:
        """
        Move the chapter at from_id to the position of to_id.

        Chapters in between shift by one. Unknown ids and from_id == to_id
        leave the list untouched.
        """
        old_index = self._index_of(from_id)
        new_index = self._index_of(to_id)
        if old_index is None or new_index is None or old_index == new_index:
            return False
        chapter = self._chapters.pop(old_index)
        self._chapters.insert(new_index, chapter)
        self._emit(DocumentEvent.CHAPTERS_CHANGED)
        return True

    def rename_chapter(self, chapter_id: str, title: str) -> bool:
        index = self._index_of(chapter_id)
        if index is None or not title.strip():
            return False
        self._chapters[index].title = title.strip()
        self._emit(DocumentEvent.CHAPTERS_CHANGED)
        return True

    def delete_chapter(self, chapter_id: str) -> bool:
        """
        Remove a chapter. The last remaining chapter cannot be deleted.

        Deleting the active chapter selects the one now at its position
        (or the new last chapter).
        """
        index = self._index_of(chapter_id)
        if index is None or len(self._chapters) == 1:
            return False
        del self._chapters[index]
        self._emit(DocumentEvent.CHAPTERS_CHANGED)
        if chapter_id == self.active_chapter_id:
            neighbour = self._chapters[min(index, len(self._chapters) - 1)]
            self.select_chapter(neighbour.id)
        return True

    def update_metadata(self, metadata: ChapterMetadata | Dict[str, Any]) -> bool:
        """Replace the active chapter's metadata."""
        index = self._index_of(self.active_chapter_id)
        if index is None:
            return False
        if not isinstance(metadata, ChapterMetadata):
            metadata = ChapterMetadata.model_validate(metadata)
        self._chapters[index].metadata = metadata
        self._emit(DocumentEvent.CHAPTERS_CHANGED)
        return True

    def restore_content(self, content: str) -> bool:
        """Put restored content into both the buffer and the active chapter."""
        index = self._index_of(self.active_chapter_id)
        if index is None:
            return False
        self.buffer = content
        self._chapters[index].content = content
        self._emit(DocumentEvent.CHAPTERS_CHANGED)
        self._emit(DocumentEvent.BUFFER_CHANGED)
        return True
