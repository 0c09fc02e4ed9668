"""
Editor Session

Everything one open manuscript needs: the document store, its autosave
scheduler, version snapshots, drafts and the AI writing actions.

Every user-triggered operation reports its outcome through the session's
notifier. Remote and AI failures become error notifications and leave the
local state as it was; nothing here raises to the caller except opening a
manuscript that does not exist.
"""

import json
import re
from typing import Optional, Dict, Any, List

from scribe.config import config
from scribe.database.drafts import DraftService
from scribe.database.manuscripts import (
    ManuscriptNotFoundError,
    ManuscriptService,
    chapters_from_content,
)
from scribe.database.versions import ChapterVersionService
from scribe.utils.logging import get_logger
from scribe.utils.notifications import Notifier
from scribe.writer import (
    AIServiceError,
    PaymentRequiredError,
    RateLimitError,
    REWRITE_ACTIONS,
    TranscriptionService,
    WriterService,
)
from .autosave import AutosaveScheduler
from .document import DocumentStore
from .text import html_to_text, paragraph

editor_logger = get_logger("editor")


class EditorSession:
    """
    Usage:
        session = await EditorSession.open(manuscript_id)
        session.store.update_buffer("<p>Once upon a time</p>")
        await session.save_version()
        await session.close()
    """

    def __init__(
        self,
        manuscript: Dict[str, Any],
        *,
        manuscript_service: Optional[ManuscriptService] = None,
        version_service: Optional[ChapterVersionService] = None,
        draft_service: Optional[DraftService] = None,
        writer: Optional[WriterService] = None,
        transcriber: Optional[TranscriptionService] = None,
        notifier: Optional[Notifier] = None,
        buffer_delay: Optional[float] = None,
        save_delay: Optional[float] = None,
    ):
        self.manuscript = manuscript
        self.manuscript_id = str(manuscript["id"])
        self.manuscripts = manuscript_service or ManuscriptService()
        self.versions = version_service or ChapterVersionService()
        self.drafts = draft_service or DraftService()
        self.writer = writer or WriterService()
        self.transcriber = transcriber or TranscriptionService()
        self.notifier = notifier or Notifier(logger=editor_logger)

        self.store = DocumentStore(chapters_from_content(manuscript.get("content")))
        self.autosave = AutosaveScheduler(
            self.store,
            self._persist_chapters,
            buffer_delay=buffer_delay,
            save_delay=save_delay,
            notifier=self.notifier,
            manuscript_id=self.manuscript_id,
        )

    @classmethod
    async def open(
        cls,
        manuscript_id: str,
        *,
        manuscript_service: Optional[ManuscriptService] = None,
        **kwargs: Any,
    ) -> "EditorSession":
        """
        Load a manuscript and start editing it.

        Raises:
            ManuscriptNotFoundError: If the manuscript does not exist
        """
        service = manuscript_service or ManuscriptService()
        manuscript = await service.get_by_id(manuscript_id)
        if not manuscript:
            raise ManuscriptNotFoundError(f"Manuscript {manuscript_id} not found")
        return cls(manuscript, manuscript_service=service, **kwargs)

    async def _persist_chapters(self, records: List[Dict[str, Any]]) -> None:
        await self.manuscripts.save_chapters(self.manuscript_id, records)

    async def close(self) -> None:
        """Write any pending edits and wait for in-flight saves."""
        await self.autosave.aclose(flush=True)

    # =========================================================================
    # Version Snapshots
    # =========================================================================

    async def save_version(self) -> Optional[Dict[str, Any]]:
        """Snapshot the active chapter, including edits still in the buffer."""
        self.autosave.flush()
        chapter = self.store.active_chapter
        if chapter is None:
            return None

        try:
            version = await self.versions.save_version(
                self.manuscript_id, chapter.id, chapter.title, chapter.content
            )
        except Exception as e:
            self.notifier.error("Failed to save version", str(e))
            return None

        self.notifier.success(f"Version {version['version_number']} saved!")
        return version

    async def list_versions(self) -> List[Dict[str, Any]]:
        """Snapshots of the active chapter, newest first."""
        try:
            return await self.versions.list_versions(
                self.manuscript_id, self.store.active_chapter_id
            )
        except Exception as e:
            self.notifier.error("Failed to load version history", str(e))
            return []

    def restore_version(self, version: Dict[str, Any]) -> None:
        """Put a snapshot's content back into the active chapter."""
        content = ChapterVersionService.restore_version(version)
        self.store.restore_content(content)
        self.notifier.success(f"Restored to version {version['version_number']}")

    # =========================================================================
    # Drafts
    # =========================================================================

    async def save_draft(self, title: str, description: Optional[str] = None) -> Optional[Dict[str, Any]]:
        if not title or not title.strip():
            self.notifier.error("Draft title is required")
            return None

        self.autosave.flush()
        try:
            draft = await self.drafts.save(
                self.manuscript_id, title, self.store.chapter_records(), description
            )
        except Exception as e:
            self.notifier.error("Failed to save draft", str(e))
            return None

        self.notifier.success("Draft saved!")
        return draft

    async def list_drafts(self) -> List[Dict[str, Any]]:
        try:
            return await self.drafts.list_drafts(self.manuscript_id)
        except Exception as e:
            self.notifier.error("Failed to load drafts", str(e))
            return []

    async def load_draft(self, draft: Dict[str, Any]) -> bool:
        """Replace the chapter list with a draft's; autosave persists it."""
        try:
            chapters = await self.drafts.mark_current(draft)
        except Exception as e:
            self.notifier.error("Failed to load draft", str(e))
            return False

        self.store.replace_chapters(chapters)
        self.notifier.success(f"Loaded draft: {draft['title']}")
        return True

    async def delete_draft(self, draft_id: str) -> bool:
        try:
            await self.drafts.delete(draft_id)
        except Exception as e:
            self.notifier.error("Failed to delete draft", str(e))
            return False
        self.notifier.success("Draft deleted")
        return True

    # =========================================================================
    # AI Writing Actions
    # =========================================================================

    def _report_ai_error(self, error: AIServiceError, fallback: str) -> None:
        if isinstance(error, (RateLimitError, PaymentRequiredError)):
            self.notifier.error(error.message)
        else:
            self.notifier.error(fallback, error.message)

    async def _call_ai(self, action: str, fallback: str = "AI operation failed", **extra: Any) -> Optional[str]:
        plain_text = html_to_text(self.store.buffer)
        payload = {
            "text": plain_text,
            "context": plain_text[-config.AI_CONTEXT_CHARS:],
            **extra,
        }
        try:
            return await self.writer.run(action, **payload)
        except AIServiceError as e:
            self._report_ai_error(e, fallback)
            return None

    async def autocomplete(self) -> Optional[str]:
        """Continue the chapter from where the author stopped."""
        result = await self._call_ai("autocomplete")
        if result:
            self.store.update_buffer(self.store.buffer + paragraph(result))
            self.notifier.success("AI continued your story!")
        return result

    async def rewrite(self, style: str) -> Optional[str]:
        """Rewrite the chapter in a style: suspenseful, show or dialogue."""
        action = REWRITE_ACTIONS.get(style)
        if action is None:
            self.notifier.error(f"Unknown rewrite style: {style}")
            return None

        result = await self._call_ai(action)
        if result:
            self.store.update_buffer(paragraph(result))
            self.notifier.success("Text rewritten!")
        return result

    async def generate_scene(self, prompt: str) -> Optional[str]:
        if not prompt or not prompt.strip():
            self.notifier.error("Please enter a scene description")
            return None

        result = await self._call_ai("generate-scene", prompt=prompt)
        if result:
            self.store.update_buffer(self.store.buffer + paragraph(result))
            self.notifier.success("Scene generated!")
        return result

    async def summarize(self) -> Optional[str]:
        if not html_to_text(self.store.buffer).strip():
            self.notifier.error("No content to summarize")
            return None

        result = await self._call_ai("summarize")
        if result:
            self.notifier.info("Chapter Summary", result)
        return result

    def manuscript_text(self) -> str:
        """Whole manuscript as plain text with a heading per chapter."""
        return "\n\n---\n\n".join(
            f"## {chapter.title}\n\n{html_to_text(chapter.content)}"
            for chapter in self.store.chapters
        )

    async def analyze(self, kind: str) -> Optional[str]:
        """Editorial analysis of the whole manuscript (plot, pacing, ...)."""
        self.autosave.flush()
        if not any(html_to_text(c.content).strip() for c in self.store.chapters):
            self.notifier.error("No content to analyze")
            return None

        text = self.manuscript_text()
        try:
            result = await self.writer.run(f"editor-{kind}", text=text, context=text)
        except AIServiceError as e:
            self._report_ai_error(e, "Analysis failed")
            return None

        self.notifier.success("Analysis complete!")
        return result

    async def chat(self, message: str, history: Optional[List[Dict[str, str]]] = None) -> Optional[str]:
        try:
            return await self.writer.chat(message, history)
        except AIServiceError as e:
            self._report_ai_error(e, "Failed to send message")
            return None

    async def generate_character(
        self,
        name: str,
        role: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Draft a character profile (personality, background, description).
        """
        if not name or not name.strip():
            self.notifier.error("Please enter a character name first")
            return None

        context = f"Role: {role or 'Not specified'}\nDescription: {description or 'Not specified'}"
        try:
            result = await self.writer.run("generate-character", text=name, context=context)
        except AIServiceError as e:
            self._report_ai_error(e, "Failed to generate profile")
            return None

        profile = parse_character_profile(result)
        if profile is None:
            self.notifier.error("Failed to generate profile", "The response was not a character profile")
            return None

        self.notifier.success("Character profile generated!")
        return profile

    async def dictate(self, audio: str) -> Optional[str]:
        """Transcribe base64 audio and append it to the active chapter."""
        try:
            text = await self.transcriber.transcribe(audio)
        except AIServiceError as e:
            self.notifier.error("Transcription failed", e.message)
            return None

        self.store.update_buffer(self.store.buffer + paragraph(text))
        self.notifier.success("Dictation added to manuscript")
        return text


_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")


def parse_character_profile(result: str) -> Optional[Dict[str, Any]]:
    """Read the JSON object out of a generate-character reply."""
    cleaned = _FENCE.sub("", result.strip())
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None
    return {key: data.get(key) for key in ("personality", "background", "description")}
