import pytest

from scribe.database.drafts import DraftNotFoundError
from scribe.database.manuscripts import ManuscriptNotFoundError
from scribe.editor.session import EditorSession
from scribe.writer import TranscriptionService, WriterService
from tests.fakes import FakeAudioClient, FakeLLM


class TestChapterVersions:
    async def test_numbers_start_at_one_and_increase(self, db, version_service):
        manuscript = db.seed_manuscript()

        numbers = [
            (await version_service.save_version(manuscript["id"], "1", "Chapter 1", f"<p>v{i}</p>"))["version_number"]
            for i in range(3)
        ]

        assert numbers == [1, 2, 3]

    async def test_numbers_are_per_chapter(self, db, version_service):
        manuscript = db.seed_manuscript()
        await version_service.save_version(manuscript["id"], "1", "One", "a")
        await version_service.save_version(manuscript["id"], "1", "One", "b")

        version = await version_service.save_version(manuscript["id"], "2", "Two", "c")

        assert version["version_number"] == 1
        assert await version_service.list_versions(manuscript["id"], "3") == []

    async def test_number_is_allocated_by_the_database_function(self, db, version_service):
        manuscript = db.seed_manuscript()

        await version_service.save_version(manuscript["id"], "1", "One", "<p>text</p>")

        assert db.rpc_calls == [(
            "create_chapter_version",
            {
                "p_manuscript_id": manuscript["id"],
                "p_chapter_id": "1",
                "p_title": "One",
                "p_content": "<p>text</p>",
            },
        )]

    async def test_list_newest_first(self, db, version_service):
        manuscript = db.seed_manuscript()
        for content in ("a", "b", "c"):
            await version_service.save_version(manuscript["id"], "1", "One", content)

        versions = await version_service.list_versions(manuscript["id"], "1")

        assert [v["version_number"] for v in versions] == [3, 2, 1]
        assert versions[0]["content"] == "c"

    async def test_get_by_id(self, db, version_service):
        manuscript = db.seed_manuscript()
        saved = await version_service.save_version(manuscript["id"], "1", "One", "text")
        assert (await version_service.get_by_id(saved["id"]))["content"] == "text"
        assert await version_service.get_by_id("missing") is None


class TestManuscripts:
    async def test_create_with_one_empty_chapter(self, manuscript_service):
        manuscript = await manuscript_service.create("user-1", "  Night Train  ")
        assert manuscript["title"] == "Night Train"
        stored = await manuscript_service.get_by_id(manuscript["id"])
        assert stored["content"]["chapters"] == [
            {"id": "1", "title": "Chapter 1", "content": ""}
        ]

    async def test_title_required(self, manuscript_service):
        with pytest.raises(ValueError, match="Title is required"):
            await manuscript_service.create("user-1", "   ")

    async def test_library_is_scoped_to_user(self, db, manuscript_service):
        db.seed_manuscript(user_id="user-1", title="Mine")
        db.seed_manuscript(user_id="user-2", title="Theirs")

        library = await manuscript_service.get_user_manuscripts("user-1")

        assert [m["title"] for m in library] == ["Mine"]

    async def test_save_chapters_overwrites_list(self, db, manuscript_service):
        manuscript = db.seed_manuscript()
        chapters = [{"id": "1", "title": "A", "content": "x"}, {"id": "2", "title": "B", "content": "y"}]

        await manuscript_service.save_chapters(manuscript["id"], chapters)

        assert db.manuscript_chapters(manuscript["id"]) == chapters

    async def test_missing_manuscript(self, manuscript_service):
        with pytest.raises(ManuscriptNotFoundError):
            await manuscript_service.update("missing", {"title": "x"})
        assert await manuscript_service.get_by_id("missing") is None


class TestDrafts:
    async def test_only_latest_draft_is_current(self, db, draft_service):
        manuscript = db.seed_manuscript()
        first = await draft_service.save(manuscript["id"], "First", [{"id": "1", "title": "A", "content": ""}])
        second = await draft_service.save(manuscript["id"], "Second", [])

        drafts = {d["id"]: d for d in await draft_service.list_drafts(manuscript["id"])}

        assert drafts[first["id"]]["is_current"] is False
        assert drafts[second["id"]]["is_current"] is True

    async def test_mark_current_returns_chapters(self, db, draft_service):
        manuscript = db.seed_manuscript()
        chapters = [{"id": "1", "title": "Old", "content": "<p>old</p>"}]
        first = await draft_service.save(manuscript["id"], "First", chapters)
        await draft_service.save(manuscript["id"], "Second", [])

        assert await draft_service.mark_current(first) == chapters
        assert (await draft_service.get_by_id(first["id"]))["is_current"] is True

    async def test_title_required_and_delete(self, db, draft_service):
        manuscript = db.seed_manuscript()
        with pytest.raises(ValueError, match="Draft title is required"):
            await draft_service.save(manuscript["id"], "", [])
        with pytest.raises(DraftNotFoundError):
            await draft_service.delete("missing")


class TestRestoreRoundTrip:
    async def test_restore_then_save_keeps_content(self, db, manuscript_service, version_service, draft_service):
        manuscript = db.seed_manuscript(chapters=[{"id": "1", "title": "Chapter 1", "content": "<p>first</p>"}])
        session = EditorSession(
            manuscript,
            manuscript_service=manuscript_service,
            version_service=version_service,
            draft_service=draft_service,
            writer=WriterService(llm=FakeLLM()),
            transcriber=TranscriptionService(client=FakeAudioClient()),
            buffer_delay=0.01,
            save_delay=0.02,
        )

        v1 = await session.save_version()
        session.store.update_buffer("<p>second</p>")
        v2 = await session.save_version()
        assert (v1["version_number"], v2["version_number"]) == (1, 2)
        assert v2["content"] == "<p>second</p>"

        session.restore_version(v1)
        assert session.store.buffer == "<p>first</p>"
        assert session.store.active_chapter.content == "<p>first</p>"
        assert session.notifier.latest.message == "Restored to version 1"

        v3 = await session.save_version()
        assert v3["version_number"] == 3
        assert v3["content"] == v1["content"]

        await session.close()
        assert db.manuscript_chapters(manuscript["id"])[0]["content"] == "<p>first</p>"
