from scribe.editor.document import DocumentEvent, DocumentStore
from scribe.editor.models import Chapter, ChapterStatus
from scribe.editor.text import count_words, html_to_text


def three_chapters():
    return DocumentStore([
        {"id": "1", "title": "A", "content": "<p>alpha</p>"},
        {"id": "2", "title": "B", "content": "<p>beta</p>"},
        {"id": "3", "title": "C", "content": "<p>gamma</p>"},
    ])


def ids(store):
    return [c.id for c in store.chapters]


def record_events(store):
    events = []
    store.subscribe(events.append)
    return events


class TestLoading:
    def test_default_chapter(self):
        store = DocumentStore()
        assert ids(store) == ["1"]
        assert store.active_chapter_id == "1"
        assert store.buffer == ""
        assert store.active_chapter.title == "Chapter 1"

    def test_empty_list_falls_back_to_one_chapter(self):
        store = DocumentStore([])
        assert ids(store) == ["1"]

    def test_first_chapter_becomes_active(self):
        store = three_chapters()
        assert store.active_chapter_id == "1"
        assert store.buffer == "<p>alpha</p>"

    def test_load_is_silent(self):
        store = DocumentStore()
        events = record_events(store)
        store.load([{"id": "7", "title": "Seven", "content": "x"}])
        assert events == []
        assert store.active_chapter_id == "7"

    def test_replace_chapters_is_reported(self):
        store = three_chapters()
        events = record_events(store)
        store.replace_chapters([{"id": "9", "title": "Draft", "content": "<p>d</p>"}])
        assert events == [DocumentEvent.CHAPTERS_REPLACED]
        assert store.buffer == "<p>d</p>"

    def test_chapters_are_copies(self):
        store = three_chapters()
        store.chapters[0].title = "Changed"
        assert store.chapters[0].title == "A"


class TestAddChapter:
    def test_new_chapter_after_single_chapter(self):
        store = DocumentStore([{"id": "1", "title": "Chapter 1", "content": "Once"}])
        events = record_events(store)

        chapter = store.add_chapter()

        assert chapter.id == "2"
        assert chapter.title == "Chapter 2"
        assert chapter.content == ""
        assert ids(store) == ["1", "2"]
        assert store.active_chapter_id == "2"
        assert store.buffer == ""
        assert events == [DocumentEvent.CHAPTERS_CHANGED]

    def test_custom_title(self):
        store = DocumentStore()
        assert store.add_chapter("Prologue").title == "Prologue"

    def test_deleted_id_is_not_reused(self):
        store = three_chapters()
        store.delete_chapter("3")
        chapter = store.add_chapter()
        assert chapter.id == "4"
        assert chapter.title == "Chapter 3"

    def test_ids_continue_after_non_numeric_ids(self):
        store = DocumentStore([
            {"id": "intro", "title": "Intro", "content": ""},
            {"id": "5", "title": "Five", "content": ""},
        ])
        assert store.add_chapter().id == "6"


class TestReorder:
    def test_move_last_to_first(self):
        store = three_chapters()
        assert store.reorder_chapters("3", "1") is True
        assert ids(store) == ["3", "1", "2"]

    def test_move_first_to_last(self):
        store = three_chapters()
        store.reorder_chapters("1", "3")
        assert ids(store) == ["2", "3", "1"]

    def test_same_position_is_a_no_op(self):
        store = three_chapters()
        events = record_events(store)
        assert store.reorder_chapters("2", "2") is False
        assert ids(store) == ["1", "2", "3"]
        assert events == []

    def test_unknown_id_is_a_no_op(self):
        store = three_chapters()
        assert store.reorder_chapters("1", "42") is False
        assert ids(store) == ["1", "2", "3"]


class TestSelection:
    def test_select_loads_buffer(self):
        store = three_chapters()
        events = record_events(store)
        assert store.select_chapter("2") is True
        assert store.buffer == "<p>beta</p>"
        assert events == [DocumentEvent.CHAPTER_SELECTED]

    def test_select_unknown_changes_nothing(self):
        store = three_chapters()
        store.update_buffer("<p>typing</p>")
        events = record_events(store)

        assert store.select_chapter("missing") is False

        assert store.active_chapter_id == "1"
        assert store.buffer == "<p>typing</p>"
        assert events == []

    def test_update_buffer_leaves_list_alone(self):
        store = three_chapters()
        store.update_buffer("<p>new</p>")
        assert store.get_chapter("1").content == "<p>alpha</p>"


class TestDelete:
    def test_last_chapter_cannot_be_deleted(self):
        store = DocumentStore()
        assert store.delete_chapter("1") is False
        assert ids(store) == ["1"]

    def test_deleting_active_selects_neighbour(self):
        store = three_chapters()
        store.select_chapter("2")
        events = record_events(store)
        store.delete_chapter("2")
        assert events == [DocumentEvent.CHAPTERS_CHANGED, DocumentEvent.CHAPTER_SELECTED]
        assert store.active_chapter_id == "3"
        assert store.buffer == "<p>gamma</p>"

    def test_deleting_active_last_selects_previous(self):
        store = three_chapters()
        store.select_chapter("3")
        store.delete_chapter("3")
        assert store.active_chapter_id == "2"


class TestEdits:
    def test_rename(self):
        store = three_chapters()
        assert store.rename_chapter("2", "  The Storm ") is True
        assert store.get_chapter("2").title == "The Storm"
        assert store.rename_chapter("2", "   ") is False

    def test_metadata(self):
        store = three_chapters()
        store.update_metadata({"notes": "Tighten", "tags": ["act one"], "status": "revision"})
        metadata = store.active_chapter.metadata
        assert metadata.status == ChapterStatus.REVISION
        assert metadata.tags == ["act one"]
        assert store.chapter_records()[0]["metadata"]["status"] == "revision"

    def test_restore_updates_buffer_and_list(self):
        store = three_chapters()
        events = record_events(store)
        store.restore_content("<p>old text</p>")
        assert store.buffer == "<p>old text</p>"
        assert store.get_chapter("1").content == "<p>old text</p>"
        assert events == [DocumentEvent.CHAPTERS_CHANGED, DocumentEvent.BUFFER_CHANGED]

    def test_commit_to_missing_chapter(self):
        store = three_chapters()
        assert store.commit_content("99", "x") is False


class TestText:
    def test_search_is_case_insensitive(self):
        store = three_chapters()
        assert [c.id for c in store.search("BETA")] == ["2"]
        assert [c.id for c in store.search("c")] == ["3"]

    def test_word_counts(self):
        store = DocumentStore([
            {"id": "1", "title": "A", "content": "<p>Hello brave</p><p>new world</p>"},
            {"id": "2", "title": "B", "content": "<p>One more</p>"},
        ])
        assert store.chapter_word_count() == 4
        assert store.total_word_count() == 6

    def test_html_to_text(self):
        assert html_to_text("<p>Hello &amp; goodbye</p><p>Again</p>") == "Hello & goodbye\nAgain"
        assert html_to_text("") == ""
        assert count_words("<p></p>") == 0

    def test_chapter_record_round_trip(self):
        chapter = Chapter(id="1", title="One", content="<p>x</p>")
        assert chapter.to_record() == {"id": "1", "title": "One", "content": "<p>x</p>"}
        assert Chapter.from_record(chapter.to_record()) == chapter
