"""
Unit tests for the content-shape classifier.
"""
from core.config import PAGE_CONTENT_PLACEHOLDER, EMPTY_PAGE_CONTENT, EMPTY_SUBSECTION_SUMMARY
from models.content_models import (
    PagesView,
    FlashcardsView,
    CategorizedFlashcardsView,
    EmptyView,
)
from services.normalization.classifier import classify, legacy_blob_text


class TestPrecedence:
    """Test which variant wins for each record shape."""

    def test_categorized_flashcards_win(self):
        """Test concept/formula cards take priority over pages."""
        view = classify({
            "title": "1.1.1 Forces",
            "conceptFlashCards": [{"question": "q", "answer": "a"}],
            "pages": [{"title": "P", "content": "c"}],
        })

        assert isinstance(view, CategorizedFlashcardsView)
        assert view.concept_flashcards[0].question == "q"
        assert view.formula_flashcards == []

    def test_empty_categorized_lists_ignored(self):
        """Test that empty concept/formula lists fall through."""
        view = classify({
            "title": "T",
            "conceptFlashCards": [],
            "formulaFlashCards": [],
            "pages": [{"title": "P", "content": "c"}],
        })

        assert isinstance(view, PagesView)

    def test_flashcards_from_first_page(self):
        """Test page-embedded flashcards, summary taken from the page."""
        view = classify({
            "title": "T",
            "summary": "Old summary",
            "pages": [{
                "content": "Page summary",
                "flashcards": [{"question": "q1", "answer": "a1"}, {"front": "q2", "back": "a2"}],
            }],
        })

        assert isinstance(view, FlashcardsView)
        assert view.summary == "Page summary"
        assert [c.question for c in view.flashcards] == ["q1", "q2"]
        assert view.synthesized is False
        assert "pages" not in view.to_dict()["data"]

    def test_top_level_flashcards(self):
        """Test flashCards stored directly on the record."""
        view = classify({"title": "T", "flashCards": [{"question": "q", "answer": "a"}]})

        assert isinstance(view, FlashcardsView)
        assert len(view.flashcards) == 1

    def test_pages_with_fallbacks(self):
        """Test page title fallback and content placeholder."""
        view = classify({
            "title": "T",
            "pages": [{"pageTitle": "From pageTitle"}, {"content": "body"}],
        })

        assert isinstance(view, PagesView)
        assert view.pages[0].title == "From pageTitle"
        assert view.pages[0].content == PAGE_CONTENT_PLACEHOLDER
        assert view.pages[1].title == "Page Content"
        assert view.pages[1].content == "body"


class TestSynthesizedFlashcards:
    """Test the legacy conversion to five flashcards."""

    def test_legacy_blob(self):
        """Test the synthesized set built from an explanation blob."""
        body = "x" * 300
        view = classify({"title": "Vectors", "explanation": body, "keyTakeaway": "Magnitude matters"})

        assert isinstance(view, FlashcardsView)
        assert view.synthesized is True
        assert len(view.flashcards) == 5
        assert [c.id for c in view.flashcards] == [1, 2, 3, 4, 5]
        assert view.flashcards[0].question == "What is Vectors?"
        assert view.flashcards[0].answer == "x" * 200
        assert view.flashcards[1].answer == "Magnitude matters"
        assert view.flashcards[3].answer == "Key concepts and principles for academic success"
        assert [c.difficulty for c in view.flashcards] == [
            "basic", "intermediate", "intermediate", "intermediate", "advanced",
        ]
        assert [c.category for c in view.flashcards] == [
            "definition", "concept", "application", "concept", "analysis",
        ]

    def test_unrecognized_pages_shape(self):
        """Test pages carrying an empty flashcards list."""
        view = classify({"pages": [{"flashcards": []}]})

        assert isinstance(view, FlashcardsView)
        assert view.synthesized is True
        assert view.flashcards[0].question == "What is this topic?"
        assert view.flashcards[0].answer == "Academic concept to be studied"
        assert view.summary == "Converted legacy content to flashcard format"

    def test_summary_used_as_answer(self):
        """Test the record summary feeds the fourth answer."""
        view = classify({"title": "T", "generatedMarkdown": "# md", "summary": "Sum"})

        assert view.flashcards[3].answer == "Sum"


class TestEmpty:
    """Test the empty variant."""

    def test_no_content(self):
        """Test a record with only a title."""
        view = classify({"title": "1.1.1 Intro"})

        assert isinstance(view, EmptyView)
        assert view.title == "1.1.1 Intro"
        assert view.summary == EMPTY_SUBSECTION_SUMMARY
        assert view.pages[0].title == "Introduction"
        assert view.pages[0].content == EMPTY_PAGE_CONTENT
        assert view.to_dict()["data"]["requiresGeneration"] is True

    def test_malformed_input_never_raises(self):
        """Test odd shapes fall back to empty."""
        for record in (None, "text", [], {}, {"pages": []}, {"pages": "oops"}, {"content": "   "}):
            assert isinstance(classify(record), EmptyView)

    def test_view_type_tags(self):
        """Test the serialized type tag of every variant."""
        assert classify({}).to_dict()["type"] == "empty"
        assert classify({"pages": [{"content": "c"}]}).to_dict()["type"] == "pages"
        assert classify({"flashcards": [{"question": "q", "answer": "a"}]}).to_dict()["type"] == "flashcards"
        assert classify({"formulaFlashCards": [{"question": "q", "answer": "a"}]}).to_dict()["type"] == (
            "categorizedFlashcards"
        )


class TestLegacyBlobText:
    """Test legacy body lookup."""

    def test_lookup_order(self):
        """Test explanation is preferred over content."""
        assert legacy_blob_text({"content": "c", "explanation": "e"}) == "e"

    def test_blank_values_skipped(self):
        """Test whitespace-only fields are ignored."""
        assert legacy_blob_text({"explanation": " ", "text": "t"}) == "t"
        assert legacy_blob_text({}) is None
