import asyncio

import pytest

from scribe.editor.autosave import AutosaveScheduler, Debouncer
from scribe.editor.document import DocumentStore
from scribe.utils.notifications import NotificationLevel, Notifier

BUFFER_DELAY = 0.01
SAVE_DELAY = 0.02
SETTLE = 0.15


class Recorder:
    """Persist function that remembers every chapter list it was given."""

    def __init__(self, error=None):
        self.calls = []
        self.error = error

    async def __call__(self, records):
        self.calls.append(records)
        if self.error is not None:
            raise self.error


def two_chapters():
    return DocumentStore([
        {"id": "1", "title": "One", "content": ""},
        {"id": "2", "title": "Two", "content": ""},
    ])


@pytest.fixture
def store():
    return two_chapters()


@pytest.fixture
def persist():
    return Recorder()


@pytest.fixture
async def scheduler(store, persist):
    scheduler = AutosaveScheduler(
        store, persist, buffer_delay=BUFFER_DELAY, save_delay=SAVE_DELAY, notifier=Notifier()
    )
    yield scheduler
    await scheduler.aclose(flush=False)


async def settle(scheduler):
    await asyncio.sleep(SETTLE)
    await scheduler.wait_idle()


class TestDebouncer:
    async def test_rearming_fires_once_with_latest_args(self):
        fired = []
        timer = Debouncer(0.01)
        timer.arm(fired.append, "first")
        timer.arm(fired.append, "second")
        assert timer.args == ("second",)

        await asyncio.sleep(0.05)

        assert fired == ["second"]
        assert timer.pending is False

    async def test_flush_and_cancel(self):
        fired = []
        timer = Debouncer(10)
        timer.arm(fired.append, "now")
        assert timer.flush() is True
        assert fired == ["now"]
        assert timer.flush() is False

        timer.arm(fired.append, "never")
        timer.cancel()
        await asyncio.sleep(0)
        assert fired == ["now"]


class TestBufferCommit:
    async def test_typing_burst_commits_and_saves_once(self, store, persist, scheduler):
        for text in ("<p>I</p>", "<p>It</p>", "<p>It was</p>"):
            store.update_buffer(text)

        assert store.get_chapter("1").content == ""
        await settle(scheduler)

        assert store.get_chapter("1").content == "<p>It was</p>"
        assert len(persist.calls) == 1
        assert persist.calls[0][0]["content"] == "<p>It was</p>"
        assert scheduler.save_count == 1
        assert scheduler.last_saved_at is not None

    async def test_edit_keeps_its_chapter_after_switch(self, store, persist, scheduler):
        store.update_buffer("<p>one</p>")
        store.select_chapter("2")

        await settle(scheduler)

        assert store.get_chapter("1").content == "<p>one</p>"
        assert store.get_chapter("2").content == ""
        assert persist.calls[-1][0]["content"] == "<p>one</p>"

    async def test_typing_in_new_chapter_flushes_previous_edit(self, store, scheduler):
        store.update_buffer("<p>one</p>")
        store.select_chapter("2")
        store.update_buffer("<p>two</p>")

        assert store.get_chapter("1").content == "<p>one</p>"
        assert scheduler.pending_commit == ("2", "<p>two</p>")

        await settle(scheduler)
        assert store.get_chapter("2").content == "<p>two</p>"

    async def test_returning_to_chapter_shows_uncommitted_edit(self, store, scheduler):
        store.update_buffer("<p>one</p>")
        store.select_chapter("2")
        store.select_chapter("1")

        assert store.buffer == "<p>one</p>"
        assert store.get_chapter("1").content == "<p>one</p>"
        assert scheduler.pending_commit is None

    async def test_deleting_active_chapter_keeps_pending_edit_of_neighbour(self, store, scheduler):
        store.select_chapter("2")
        store.update_buffer("<p>new edit</p>")
        store.select_chapter("1")
        store.delete_chapter("1")

        assert store.active_chapter_id == "2"
        assert store.buffer == "<p>new edit</p>"

        store.update_buffer(store.buffer + "<p>more</p>")
        await settle(scheduler)

        assert store.get_chapter("2").content == "<p>new edit</p><p>more</p>"

    async def test_replaced_chapters_drop_pending_edit(self, store, persist, scheduler):
        store.update_buffer("<p>stale</p>")
        store.replace_chapters([{"id": "5", "title": "Draft", "content": "<p>draft</p>"}])

        assert scheduler.pending_commit is None
        await settle(scheduler)

        assert persist.calls[-1] == [{"id": "5", "title": "Draft", "content": "<p>draft</p>"}]


class TestRemoteSave:
    async def test_failure_is_reported_and_not_retried(self, store):
        persist = Recorder(error=RuntimeError("network down"))
        notifier = Notifier()
        scheduler = AutosaveScheduler(
            store, persist, buffer_delay=BUFFER_DELAY, save_delay=SAVE_DELAY, notifier=notifier
        )

        store.update_buffer("<p>lost?</p>")
        await settle(scheduler)
        await asyncio.sleep(SETTLE)

        assert len(persist.calls) == 1
        assert scheduler.failure_count == 1
        assert notifier.latest.level == NotificationLevel.ERROR
        assert notifier.latest.message == "Failed to save"
        assert notifier.latest.description == "network down"
        assert store.get_chapter("1").content == "<p>lost?</p>"

        # The next change tries again
        persist.error = None
        store.rename_chapter("1", "First")
        await settle(scheduler)
        assert len(persist.calls) == 2
        assert scheduler.save_count == 1
        await scheduler.aclose()

    async def test_structural_change_saves_without_buffer_commit(self, store, persist, scheduler):
        store.add_chapter("Three")
        await settle(scheduler)
        assert [c["id"] for c in persist.calls[-1]] == ["1", "2", "3"]

    async def test_save_now(self, store, persist, scheduler):
        store.update_buffer("<p>quick</p>")
        assert await scheduler.save_now() is True
        assert persist.calls[-1][0]["content"] == "<p>quick</p>"
        assert scheduler.save_pending is False

    async def test_close_flushes_pending_edit(self, store, persist):
        scheduler = AutosaveScheduler(store, persist, buffer_delay=10, save_delay=10)
        store.update_buffer("<p>last words</p>")

        await scheduler.aclose()

        assert persist.calls == [[
            {"id": "1", "title": "One", "content": "<p>last words</p>"},
            {"id": "2", "title": "Two", "content": ""},
        ]]

    async def test_close_without_changes_does_not_save(self, store, persist):
        scheduler = AutosaveScheduler(store, persist, buffer_delay=10, save_delay=10)
        await scheduler.aclose()
        assert persist.calls == []
