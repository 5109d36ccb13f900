"""
Data models for the content pipeline: math spans, content views and
the parsed heading hierarchy.
"""
from dataclasses import dataclass, field
from typing import ClassVar, List, Dict, Optional, Any, Union

from models.course_models import Page, Flashcard


@dataclass(frozen=True)
class MathSpan:
    """LaTeX span replaced by a placeholder token"""
    placeholder: str  # "__MATH_INLINE_0__"
    original: str  # canonical "\(...\)" / "\[...\]" form
    kind: str  # 'inline' | 'block'
    source: str = ""  # text as matched, delimiters included


@dataclass
class ProtectedText:
    """Result of shielding math spans from text transforms"""
    shielded: str
    spans: List[MathSpan] = field(default_factory=list)


# Content views. Exactly one is produced per subsection by the classifier.

@dataclass
class PagesView:
    type: ClassVar[str] = "pages"
    title: str
    summary: str
    pages: List[Page] = field(default_factory=list)
    difficulty: str = "Intermediate"
    estimated_time: str = "15-20 minutes"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "data": {
                "title": self.title,
                "summary": self.summary,
                "pages": [p.to_dict() for p in self.pages],
                "difficulty": self.difficulty,
                "estimatedTime": self.estimated_time,
            },
        }


@dataclass
class FlashcardsView:
    type: ClassVar[str] = "flashcards"
    title: str
    summary: str
    flashcards: List[Flashcard] = field(default_factory=list)
    synthesized: bool = False  # True when built from legacy content
    difficulty: str = "Intermediate"
    estimated_time: str = "10-15 minutes"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "data": {
                "title": self.title,
                "summary": self.summary,
                "flashcards": [c.to_dict() for c in self.flashcards],
                "synthesized": self.synthesized,
                "difficulty": self.difficulty,
                "estimatedTime": self.estimated_time,
            },
        }


@dataclass
class CategorizedFlashcardsView:
    type: ClassVar[str] = "categorizedFlashcards"
    title: str
    summary: str
    concept_flashcards: List[Flashcard] = field(default_factory=list)
    formula_flashcards: List[Flashcard] = field(default_factory=list)
    difficulty: str = "Intermediate"
    estimated_time: str = "5-10 minutes"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "data": {
                "title": self.title,
                "summary": self.summary,
                "conceptFlashCards": [c.to_dict() for c in self.concept_flashcards],
                "formulaFlashCards": [c.to_dict() for c in self.formula_flashcards],
                "difficulty": self.difficulty,
                "estimatedTime": self.estimated_time,
            },
        }


@dataclass
class EmptyView:
    """Nothing generated yet; holds a single placeholder page"""
    type: ClassVar[str] = "empty"
    title: str
    summary: str
    pages: List[Page] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "data": {
                "title": self.title,
                "summary": self.summary,
                "pages": [p.to_dict() for p in self.pages],
                "requiresGeneration": True,
            },
        }


ContentView = Union[PagesView, FlashcardsView, CategorizedFlashcardsView, EmptyView]


@dataclass
class ParsedSubsection:
    """A `####` heading found in module content"""
    number: str  # "1.1.1"
    name: str
    unit: str  # first dotted component
    unit_title: str = ""
    unit_context: str = ""  # "Unit 1: Title" when the unit heading exists
    section_title: str = ""  # title of the "N.M" parent section

    @property
    def title(self) -> str:
        return f"{self.number} {self.name}"

    @property
    def formatted_title(self) -> str:
        return f"{self.section_title}: {self.name}" if self.section_title else self.name


@dataclass
class HeadingStructure:
    """Unit/section/subsection hierarchy derived from headings"""
    units: Dict[str, str] = field(default_factory=dict)  # "1" -> title
    sections: Dict[str, str] = field(default_factory=dict)  # "1.1" -> title
    subsections: List[ParsedSubsection] = field(default_factory=list)


@dataclass
class SubsectionView:
    """Parsed subsection merged with its AI-generated record"""
    number: str
    name: str
    title: str
    formatted_title: str
    unit: str
    unit_context: str
    content: ContentView
    source_index: Optional[int] = None  # index into detailedSubsections

    def to_dict(self) -> Dict[str, Any]:
        return {
            "number": self.number,
            "name": self.name,
            "title": self.title,
            "formattedTitle": self.formatted_title,
            "unit": self.unit,
            "unitContext": self.unit_context,
            "sourceIndex": self.source_index,
            "content": self.content.to_dict(),
        }
