"""
Module editor: field updates, page edit sessions and auto-save wiring.
"""
import copy
import functools
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Union

from core.notifications import Notifier
from models.content_models import SubsectionView
from models.course_models import Module, Quiz, Resource
from models.session_models import EditMode, EditSession
from services.conversion.html_markdown import looks_like_html, to_markdown
from services.conversion.markdown_html import to_html
from services.editor.autosave import AutoSaver
from services.normalization.classifier import LEGACY_BLOB_KEYS, legacy_blob_text
from services.normalization.headings import merge_subsections, parse_headings
from services.normalization.pages import split_markdown_pages

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "summary", "content")

# Keys of the non-page variants, dropped when a record becomes paged
_OTHER_VARIANT_KEYS = ("flashcards", "flashCards", "conceptFlashCards", "formulaFlashCards") + LEGACY_BLOB_KEYS


def _locked(method):
    """Run an editor method under the editor's lock."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class ModuleEditor:
    """
    Holds one module being edited.

    Edits mark the module dirty and arm the auto-saver. While a page edit
    session is open, modules pushed in by the owner are ignored and
    auto-save is held back until the session is saved or cancelled.
    """

    def __init__(
        self,
        module: Union[Module, Dict[str, Any]],
        on_persist: Callable[[Module], None],
        notifier: Optional[Notifier] = None,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        self.module = module if isinstance(module, Module) else Module.from_dict(module)
        self.on_persist = on_persist
        self.notifier = notifier or Notifier()
        self.session: Optional[EditSession] = None
        # guards module and session; the auto-save timer thread reads them too
        self._lock = threading.RLock()
        self.saver = AutoSaver(
            persist=lambda: self.on_persist(self._snapshot()),
            notifier=self.notifier,
            is_blocked=lambda: self.session is not None,
            timer_factory=timer_factory,
        )

    @property
    def dirty(self) -> bool:
        return self.saver.pending

    # ---- module lifecycle ----

    @_locked
    def receive_module(self, module: Union[Module, Dict[str, Any]]) -> bool:
        """Replace the module unless a page edit is in progress."""
        if self.session is not None:
            logger.info("Ignoring module update while a page edit session is open")
            return False
        self.module = module if isinstance(module, Module) else Module.from_dict(module)
        self.saver.reset()
        return True

    def subsection_views(self) -> List[SubsectionView]:
        return merge_subsections(
            parse_headings(self.module.content),
            self.module.detailed_subsections,
        )

    def close(self) -> None:
        self.saver.cancel()

    # ---- field updates ----

    @_locked
    def update_field(self, name: str, value: Any) -> None:
        if name not in EDITABLE_FIELDS:
            raise ValueError(f"Unknown module field: {name}")
        setattr(self.module, name, value)
        self._touch()

    @_locked
    def add_objective(self, text: str = "") -> None:
        self.module.objectives.append(text)
        self._touch()

    @_locked
    def update_objective(self, index: int, text: str) -> bool:
        return self._update_item(self.module.objectives, index, text, "Objective")

    @_locked
    def remove_objective(self, index: int) -> bool:
        return self._remove_item(self.module.objectives, index, "Objective")

    @_locked
    def add_example(self, text: str = "") -> None:
        self.module.examples.append(text)
        self._touch()

    @_locked
    def update_example(self, index: int, text: str) -> bool:
        return self._update_item(self.module.examples, index, text, "Example")

    @_locked
    def remove_example(self, index: int) -> bool:
        return self._remove_item(self.module.examples, index, "Example")

    @_locked
    def add_resource(self, category: str, resource: Union[Resource, Dict[str, Any]]) -> None:
        if isinstance(resource, dict):
            resource = Resource.from_dict(resource)
        self.module.resources.setdefault(category, []).append(resource)
        self._touch()

    @_locked
    def update_resource(self, category: str, index: int, **fields) -> bool:
        items = self.module.resources.get(category, [])
        if not 0 <= index < len(items):
            self.notifier.error(f"Resource {index + 1} not found in {category}")
            return False
        for key, value in fields.items():
            if not hasattr(items[index], key):
                raise ValueError(f"Unknown resource field: {key}")
            setattr(items[index], key, value)
        self._touch()
        return True

    @_locked
    def remove_resource(self, category: str, index: int) -> bool:
        return self._remove_item(self.module.resources.get(category, []), index, "Resource")

    @_locked
    def set_subsection_quiz(self, subsection_index: int, quiz: Quiz) -> str:
        key = Quiz.key_for(subsection_index, quiz.difficulty)
        self.module.subsection_quizzes[key] = quiz
        self._touch()
        return key

    @_locked
    def set_detailed_subsections(self, subsections: List[Dict[str, Any]]) -> None:
        self.module.detailed_subsections = [dict(s) for s in subsections if isinstance(s, dict)]
        self._touch()

    # ---- page edit sessions ----

    @_locked
    def start_page_edit(
        self,
        subsection_index: int,
        page_index: int = 0,
        edit_mode: EditMode = EditMode.MARKDOWN,
    ) -> Optional[EditSession]:
        """Open an edit session on one page; the module is not touched."""
        record = self._subsection(subsection_index)
        if record is None:
            return None
        if page_index < 0:
            self.notifier.error(f"Page {page_index + 1} not found")
            return None
        if self.session is not None:
            logger.info("Discarding open edit session to start a new one")

        pages = _seed_pages(record)
        page = pages[page_index] if page_index < len(pages) else {}
        title = page.get("title") or page.get("pageTitle") or f"Page {page_index + 1}"
        content = page.get("content") or ""

        if edit_mode == EditMode.HTML:
            body = page.get("html") or content
            if body and not looks_like_html(body):
                body = to_html(body)
        else:
            body = to_markdown(content) if looks_like_html(content) else content

        self.session = EditSession(
            subsection_index=subsection_index,
            page_index=page_index,
            content=body,
            title=title,
            takeaway=page.get("keyTakeaway") or "",
            edit_mode=edit_mode,
        )
        return self.session

    @_locked
    def update_session(
        self,
        content: Optional[str] = None,
        title: Optional[str] = None,
        takeaway: Optional[str] = None,
    ) -> bool:
        if self.session is None:
            self.notifier.error("No page is being edited")
            return False
        if content is not None:
            self.session.content = content
        if title is not None:
            self.session.title = title
        if takeaway is not None:
            self.session.takeaway = takeaway
        return True

    @_locked
    def switch_edit_mode(self, mode: EditMode) -> bool:
        """Convert the session body to the other format."""
        if self.session is None:
            self.notifier.error("No page is being edited")
            return False
        if mode == self.session.edit_mode:
            return True
        if mode == EditMode.HTML:
            self.session.content = to_html(self.session.content)
        else:
            self.session.content = to_markdown(self.session.content)
        self.session.edit_mode = mode
        return True

    @_locked
    def save_page_edit(self) -> bool:
        """Merge the session into its page and persist."""
        session = self.session
        if session is None:
            self.notifier.error("No page is being edited")
            return False
        record = self._subsection(session.subsection_index)
        if record is None:
            return False

        updated = copy.deepcopy(record)
        pages = _seed_pages(updated)
        for key in _OTHER_VARIANT_KEYS:
            updated.pop(key, None)
        while len(pages) <= session.page_index:
            n = len(pages) + 1
            pages.append({"title": f"Page {n}", "pageTitle": f"Page {n}", "content": "", "keyTakeaway": ""})

        page = dict(pages[session.page_index])
        page["title"] = session.title
        page["pageTitle"] = session.title
        page["keyTakeaway"] = session.takeaway
        if session.edit_mode == EditMode.HTML:
            page["html"] = session.content
            page["content"] = to_markdown(session.content)
        else:
            page["content"] = session.content
            page.pop("html", None)
        page["isManuallyEdited"] = True
        page["lastEditedAt"] = datetime.now(timezone.utc).isoformat()
        page["pageNumber"] = session.page_index + 1
        pages[session.page_index] = page
        updated["pages"] = pages

        self.module.detailed_subsections[session.subsection_index] = updated
        self.session = None
        self.notifier.success("Page saved")
        self.saver.mark_dirty()
        self.saver.flush()
        return True

    @_locked
    def cancel_page_edit(self) -> None:
        self.session = None
        self.saver.resume()

    # ---- helpers ----

    def _touch(self) -> None:
        self.saver.mark_dirty()

    def _snapshot(self) -> Module:
        """Copy of the module taken under the lock, handed to on_persist."""
        with self._lock:
            return copy.deepcopy(self.module)

    def _subsection(self, index: int) -> Optional[Dict[str, Any]]:
        subsections = self.module.detailed_subsections
        if not 0 <= index < len(subsections):
            self.notifier.error(f"Subsection {index + 1} not found")
            return None
        return subsections[index]

    def _update_item(self, items: List[Any], index: int, value: Any, label: str) -> bool:
        if not 0 <= index < len(items):
            self.notifier.error(f"{label} {index + 1} not found")
            return False
        items[index] = value
        self._touch()
        return True

    def _remove_item(self, items: List[Any], index: int, label: str) -> bool:
        if not 0 <= index < len(items):
            self.notifier.error(f"{label} {index + 1} not found")
            return False
        items.pop(index)
        self._touch()
        return True


def _seed_pages(record: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Pages of a record; a legacy blob is split into pages."""
    pages = record.get("pages")
    if isinstance(pages, list) and pages and isinstance(pages[0], dict) and "flashcards" not in pages[0]:
        return [dict(p) for p in pages if isinstance(p, dict)]
    blob = legacy_blob_text(record)
    if blob:
        return [p.to_dict() for p in split_markdown_pages(blob)]
    return []
