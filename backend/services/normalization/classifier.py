"""
Content-shape classifier.

Subsection records come from several generations of the backend and can
hold pages, flashcards, categorized flashcards or a single legacy text
blob. classify() maps any record onto exactly one ContentView; it never
raises on malformed input.
"""
import logging
from typing import Any, Dict, List, Optional

from core.config import (
    FLASHCARD_ANSWER_PREVIEW_CHARS,
    PAGE_CONTENT_PLACEHOLDER,
    EMPTY_PAGE_CONTENT,
    EMPTY_PAGE_TAKEAWAY,
    EMPTY_SUBSECTION_SUMMARY,
)
from models.content_models import (
    ContentView,
    PagesView,
    FlashcardsView,
    CategorizedFlashcardsView,
    EmptyView,
)
from models.course_models import Page, Flashcard

logger = logging.getLogger(__name__)

# Fields that may hold an unstructured body, in lookup order
LEGACY_BLOB_KEYS = ("explanation", "content", "generatedMarkdown", "markdown", "text", "description")

LEGACY_SUMMARY = "Converted legacy content to flashcard format"

# (question stem, difficulty, category) for the synthesized set
_SYNTHESIZED_CARDS = (
    ("What is {title}?", "basic", "definition"),
    ("Why is {title} important?", "intermediate", "concept"),
    ("How does {title} apply in practice?", "intermediate", "application"),
    ("What should students remember about {title}?", "intermediate", "concept"),
    ("How does {title} connect to broader topics?", "advanced", "analysis"),
)


def classify(subsection: Any) -> ContentView:
    """Pick the content variant of a subsection record."""
    if not isinstance(subsection, dict):
        logger.debug(f"Non-dict subsection ({type(subsection).__name__}), treating as empty")
        return _empty_view({})

    concept = _card_list(subsection.get("conceptFlashCards"))
    formula = _card_list(subsection.get("formulaFlashCards"))
    if concept or formula:
        return CategorizedFlashcardsView(
            title=_title(subsection, "Flashcards"),
            summary=_text(subsection.get("summary")),
            concept_flashcards=concept,
            formula_flashcards=formula,
        )

    pages = subsection.get("pages")
    first_page = pages[0] if isinstance(pages, list) and pages else None

    cards = _page_flashcards(first_page) or _card_list(
        subsection.get("flashcards") or subsection.get("flashCards")
    )
    if cards:
        summary = _text(subsection.get("summary"))
        if isinstance(first_page, dict) and _text(first_page.get("content")):
            summary = _text(first_page.get("content"))
        return FlashcardsView(
            title=_title(subsection, "Flashcards"),
            summary=summary,
            flashcards=cards,
        )

    if isinstance(first_page, dict) and "flashcards" not in first_page:
        return PagesView(
            title=_title(subsection, "Subsection"),
            summary=_text(subsection.get("summary")),
            pages=[_page(p) for p in pages if isinstance(p, dict)],
        )

    blob = legacy_blob_text(subsection)
    if first_page is not None or blob:
        return synthesize_flashcards(subsection, blob or "")

    return _empty_view(subsection)


def legacy_blob_text(subsection: Dict[str, Any]) -> Optional[str]:
    """Return the first non-empty legacy body field, if any."""
    if not isinstance(subsection, dict):
        return None
    for key in LEGACY_BLOB_KEYS:
        value = subsection.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def synthesize_flashcards(subsection: Dict[str, Any], body: str) -> FlashcardsView:
    """Build the fixed five-card set from whatever text a record carries."""
    title = _text(subsection.get("title")) or "this topic"
    takeaway = _text(subsection.get("keyTakeaway"))
    summary = _text(subsection.get("summary"))

    answers = (
        body[:FLASHCARD_ANSWER_PREVIEW_CHARS] if body else "Academic concept to be studied",
        takeaway or "Important for academic understanding",
        "Practical applications will be covered in detailed study",
        summary or "Key concepts and principles for academic success",
        "Connects theoretical knowledge with practical applications",
    )
    cards = [
        Flashcard(
            id=n,
            question=stem.format(title=title),
            answer=answer,
            difficulty=difficulty,
            category=category,
        )
        for n, ((stem, difficulty, category), answer) in enumerate(
            zip(_SYNTHESIZED_CARDS, answers), start=1
        )
    ]
    return FlashcardsView(
        title=_title(subsection, "Flashcards"),
        summary=LEGACY_SUMMARY,
        flashcards=cards,
        synthesized=True,
    )


def _empty_view(subsection: Dict[str, Any]) -> EmptyView:
    intro = Page(
        title="Introduction",
        page_title="Introduction",
        content=EMPTY_PAGE_CONTENT,
        key_takeaway=EMPTY_PAGE_TAKEAWAY,
    )
    return EmptyView(
        title=_title(subsection, "Subsection"),
        summary=EMPTY_SUBSECTION_SUMMARY,
        pages=[intro],
    )


def _page(data: Dict[str, Any]) -> Page:
    page = Page.from_dict(data)
    page.title = page.title or page.page_title or "Page Content"
    if not page.content:
        page.content = PAGE_CONTENT_PLACEHOLDER
    return page


def _page_flashcards(page: Any) -> List[Flashcard]:
    if not isinstance(page, dict):
        return []
    return _card_list(page.get("flashcards"))


def _card_list(value: Any) -> List[Flashcard]:
    if not isinstance(value, list):
        return []
    return [Flashcard.from_dict(item) for item in value if isinstance(item, dict)]


def _title(subsection: Dict[str, Any], default: str) -> str:
    return _text(subsection.get("title")) or default


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""
