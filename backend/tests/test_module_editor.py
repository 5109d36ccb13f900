"""
Unit tests for the module editor and its page edit sessions.
"""
import threading

import pytest
from unittest.mock import Mock

from models.content_models import PagesView, FlashcardsView
from models.course_models import Module, Quiz
from models.session_models import EditMode
from services.editor.module_editor import ModuleEditor


def module_data():
    return {
        "title": "Mechanics",
        "summary": "Forces and motion",
        "content": "### 1.1 Basics\n#### 1.1.1 Intro\n#### 1.1.2 Next",
        "objectives": ["Understand forces"],
        "examples": [],
        "detailedSubsections": [
            {
                "title": "1.1.1 Intro",
                "pages": [{"title": "P1", "content": "Hello **x** and $a_1$", "keyTakeaway": "K"}],
            },
            {"title": "1.1.2 Next", "explanation": "Legacy body"},
        ],
        "id": "mod-1",
    }


@pytest.fixture
def persist():
    return Mock()


@pytest.fixture
def editor(persist, notifier, timers):
    return ModuleEditor(module_data(), on_persist=persist, notifier=notifier, timer_factory=timers)


class TestFieldUpdates:
    """Test module field edits and auto-save arming."""

    def test_update_field_marks_dirty(self, editor, timers, persist):
        """Test a field edit arms the debounce timer and later persists."""
        editor.update_field("title", "Dynamics")

        assert editor.module.title == "Dynamics"
        assert editor.dirty is True
        timers.last.fire()
        persist.assert_called_once_with(editor.module)
        assert editor.dirty is False

    def test_unknown_field_rejected(self, editor):
        """Test only editable fields can be set."""
        with pytest.raises(ValueError):
            editor.update_field("detailedSubsections", [])

    def test_objectives_and_examples(self, editor):
        """Test list item add/update/remove."""
        editor.add_objective("Apply Newton's laws")
        assert editor.update_objective(0, "Explain forces") is True
        editor.add_example("Falling apple")

        assert editor.module.objectives == ["Explain forces", "Apply Newton's laws"]
        assert editor.remove_example(0) is True
        assert editor.module.examples == []

    def test_invalid_item_index_notifies(self, editor, notifier):
        """Test out-of-range removal reports an error and changes nothing."""
        assert editor.remove_objective(5) is False
        assert notifier.last.level == "error"
        assert editor.module.objectives == ["Understand forces"]

    def test_resources(self, editor):
        """Test resources grouped by category."""
        editor.add_resource("articles", {"title": "Intro", "url": "https://example.com"})
        assert editor.update_resource("articles", 0, description="Read first") is True

        resource = editor.module.resources["articles"][0]
        assert resource.description == "Read first"
        assert editor.remove_resource("articles", 0) is True
        assert editor.module.resources["articles"] == []

    def test_subsection_quiz_key(self, editor):
        """Test quizzes are keyed by subsection index and difficulty."""
        key = editor.set_subsection_quiz(0, Quiz(difficulty="easy", subsection_title="1.1.1 Intro"))

        assert key == "0_easy"
        assert editor.module.subsection_quizzes["0_easy"].subsection_title == "1.1.1 Intro"


class TestSubsectionViews:
    """Test the merged subsection list."""

    def test_views(self, editor):
        """Test page and legacy records map to their views."""
        views = editor.subsection_views()

        assert [v.number for v in views] == ["1.1.1", "1.1.2"]
        assert isinstance(views[0].content, PagesView)
        assert isinstance(views[1].content, FlashcardsView)
        assert views[1].content.synthesized is True


class TestPageEditSession:
    """Test the edit session lifecycle."""

    def test_start_markdown_session(self, editor):
        """Test seeding from the page."""
        session = editor.start_page_edit(0, 0)

        assert session.content == "Hello **x** and $a_1$"
        assert session.title == "P1"
        assert session.takeaway == "K"
        assert session.edit_mode == EditMode.MARKDOWN

    def test_start_html_session_converts(self, editor):
        """Test HTML mode converts markdown page content."""
        session = editor.start_page_edit(0, 0, EditMode.HTML)

        assert session.content == "<p>Hello <strong>x</strong> and \\(a_1\\)</p>"

    def test_invalid_subsection_aborts(self, editor, notifier):
        """Test a missing subsection notifies and mutates nothing."""
        before = editor.module.to_dict()

        assert editor.start_page_edit(7, 0) is None

        assert editor.session is None
        assert notifier.last.level == "error"
        assert editor.module.to_dict() == before

    def test_start_does_not_mutate_module(self, editor):
        """Test opening a session on a legacy record leaves it as is."""
        before = editor.module.to_dict()

        session = editor.start_page_edit(1, 0)

        assert session.content == "Legacy body"
        assert session.title == "Content"
        assert editor.module.to_dict() == before

    def test_switch_edit_mode(self, editor):
        """Test toggling between formats converts the body."""
        editor.start_page_edit(0, 0)

        editor.switch_edit_mode(EditMode.HTML)
        assert editor.session.content == "<p>Hello <strong>x</strong> and \\(a_1\\)</p>"

        editor.switch_edit_mode(EditMode.MARKDOWN)
        assert editor.session.content == "Hello **x** and \\(a_1\\)"

    def test_save_markdown_edit(self, editor, persist, notifier):
        """Test saving merges the session and persists immediately."""
        editor.start_page_edit(0, 0)
        editor.update_session(content="New body", title="Renamed", takeaway="T2")

        assert editor.save_page_edit() is True

        page = editor.module.detailed_subsections[0]["pages"][0]
        assert page["content"] == "New body"
        assert page["title"] == page["pageTitle"] == "Renamed"
        assert page["keyTakeaway"] == "T2"
        assert page["isManuallyEdited"] is True
        assert page["lastEditedAt"].endswith("+00:00")
        assert page["pageNumber"] == 1
        assert "html" not in page
        assert editor.session is None
        assert notifier.history[-1].level == "success"
        persist.assert_called_once_with(editor.module)

    def test_save_html_edit_keeps_both_forms(self, editor):
        """Test HTML edits store the HTML and its markdown."""
        editor.start_page_edit(0, 0, EditMode.HTML)
        editor.update_session(content="<p>Edited <em>text</em></p>")

        editor.save_page_edit()

        page = editor.module.detailed_subsections[0]["pages"][0]
        assert page["html"] == "<p>Edited <em>text</em></p>"
        assert page["content"] == "Edited *text*"

    def test_save_legacy_record_becomes_pages(self, editor):
        """Test saving a legacy record discards the blob variant."""
        editor.start_page_edit(1, 0)
        editor.update_session(content="Rewritten")

        editor.save_page_edit()

        record = editor.module.detailed_subsections[1]
        assert "explanation" not in record
        assert record["title"] == "1.1.2 Next"
        assert record["pages"][0]["content"] == "Rewritten"

    def test_save_fills_page_gaps(self, editor):
        """Test editing past the last page creates the pages in between."""
        editor.start_page_edit(0, 2)
        editor.save_page_edit()

        pages = editor.module.detailed_subsections[0]["pages"]
        assert len(pages) == 3
        assert pages[1]["title"] == "Page 2"
        assert pages[2]["title"] == "Page 3"

    def test_cancel_discards(self, editor, persist):
        """Test cancel leaves the module untouched."""
        before = editor.module.to_dict()
        editor.start_page_edit(0, 0)
        editor.update_session(content="Throwaway")

        editor.cancel_page_edit()

        assert editor.session is None
        assert editor.module.to_dict() == before
        persist.assert_not_called()

    def test_session_calls_without_session(self, editor, notifier):
        """Test session operations need an open session."""
        assert editor.update_session(content="x") is False
        assert editor.save_page_edit() is False
        assert editor.switch_edit_mode(EditMode.HTML) is False
        assert len(notifier.errors()) == 3


class TestExternalUpdates:
    """Test module replacement from the owner."""

    def test_update_ignored_while_session_open(self, editor):
        """Test a pushed module is a no-op until save or cancel."""
        editor.start_page_edit(0, 0)
        incoming = Module.from_dict({**module_data(), "title": "Overwritten"})

        assert editor.receive_module(incoming) is False
        assert editor.module.title == "Mechanics"
        assert editor.session.title == "P1"

        editor.cancel_page_edit()
        assert editor.receive_module(incoming) is True
        assert editor.module.title == "Overwritten"

    def test_autosave_held_during_session(self, editor, timers, persist):
        """Test field edits during a session save only after it closes."""
        editor.start_page_edit(0, 0)
        editor.update_field("summary", "Changed")

        timers.last.fire()
        persist.assert_not_called()

        editor.cancel_page_edit()
        timers.last.fire()
        persist.assert_called_once()

    def test_receive_clears_dirty(self, editor, timers):
        """Test replacing the module drops pending edits."""
        editor.update_field("title", "Local")

        editor.receive_module(module_data())

        assert editor.dirty is False
        assert timers.last.cancelled is True


class TestConcurrentSave:
    """Test auto-save fired from the timer thread during owner edits."""

    def test_timer_save_waits_for_edit_in_progress(self, editor, timers, persist):
        """Test a timer save started mid-edit persists the finished edit."""
        editor.update_field("title", "First")
        timer = timers.last

        with editor._lock:
            worker = threading.Thread(target=timer.fire)
            worker.start()
            worker.join(timeout=0.2)
            assert worker.is_alive()
            persist.assert_not_called()

            editor.module.objectives.append("Added while saving")
            editor.module.summary = "Half-way"

        worker.join(timeout=2)
        assert not worker.is_alive()
        saved = persist.call_args[0][0]
        assert saved.title == "First"
        assert saved.summary == "Half-way"
        assert "Added while saving" in saved.objectives

    def test_persisted_module_is_a_snapshot(self, editor, timers, persist):
        """Test edits after a save do not leak into the saved copy."""
        editor.update_field("title", "Saved")
        timers.last.fire()

        saved = persist.call_args[0][0]
        assert saved is not editor.module

        editor.update_field("title", "Later")
        editor.add_objective("Later objective")

        assert saved.title == "Saved"
        assert "Later objective" not in saved.objectives
