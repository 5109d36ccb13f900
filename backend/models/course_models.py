"""
Data models for modules, pages, flashcards, quizzes and resources.

Records arrive from the generation backend as camelCase JSON; each model
converts with from_dict/to_dict and keeps unknown keys in `extra` so a
round trip never drops fields the editor does not understand.
"""
from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any


def _extra(data: Dict[str, Any], known: tuple) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if k not in known}


@dataclass
class Page:
    """One screen of a multi-page subsection"""
    title: str = ""
    content: str = ""
    page_title: Optional[str] = None
    html: Optional[str] = None  # set when the page was last edited as HTML
    key_takeaway: str = ""
    is_manually_edited: bool = False
    last_edited_at: Optional[str] = None  # ISO-8601
    page_number: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    _KEYS = (
        "title", "content", "pageTitle", "html", "keyTakeaway",
        "isManuallyEdited", "lastEditedAt", "pageNumber",
    )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Page":
        return cls(
            title=data.get("title") or "",
            content=data.get("content") or "",
            page_title=data.get("pageTitle"),
            html=data.get("html"),
            key_takeaway=data.get("keyTakeaway") or "",
            is_manually_edited=bool(data.get("isManuallyEdited", False)),
            last_edited_at=data.get("lastEditedAt"),
            page_number=data.get("pageNumber"),
            extra=_extra(data, cls._KEYS),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data.update({
            "title": self.title,
            "pageTitle": self.page_title or self.title,
            "content": self.content,
            "keyTakeaway": self.key_takeaway,
            "isManuallyEdited": self.is_manually_edited,
        })
        if self.html is not None:
            data["html"] = self.html
        if self.last_edited_at is not None:
            data["lastEditedAt"] = self.last_edited_at
        if self.page_number is not None:
            data["pageNumber"] = self.page_number
        return data


@dataclass
class Flashcard:
    """Question/answer pair for review"""
    question: str
    answer: str
    category: Optional[str] = None  # 'definition' | 'concept' | 'application' | 'analysis'
    difficulty: Optional[str] = None  # 'basic' | 'intermediate' | 'advanced'
    id: Optional[Any] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Flashcard":
        return cls(
            question=str(data.get("question") or data.get("front") or ""),
            answer=str(data.get("answer") or data.get("back") or ""),
            category=data.get("category"),
            difficulty=data.get("difficulty"),
            id=data.get("id"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"question": self.question, "answer": self.answer}
        if self.id is not None:
            data["id"] = self.id
        if self.category is not None:
            data["category"] = self.category
        if self.difficulty is not None:
            data["difficulty"] = self.difficulty
        return data


@dataclass
class Resource:
    """Reading, video or tool attached to a module"""
    title: str
    url: str = ""
    description: str = ""
    type: str = "article"
    extra: Dict[str, Any] = field(default_factory=dict)

    _KEYS = ("title", "url", "description", "type")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Resource":
        return cls(
            title=data.get("title") or "",
            url=data.get("url") or "",
            description=data.get("description") or "",
            type=data.get("type") or "article",
            extra=_extra(data, cls._KEYS),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data.update({
            "title": self.title,
            "url": self.url,
            "description": self.description,
            "type": self.type,
        })
        return data


@dataclass
class Quiz:
    """Generated quiz for one subsection at one difficulty"""
    questions: List[Dict[str, Any]] = field(default_factory=list)
    difficulty: str = "medium"
    subsection_title: str = ""
    formatted_subsection_title: Optional[str] = None
    total_questions: int = 0
    generated_with: Optional[str] = None
    created_at: Optional[str] = None

    @staticmethod
    def key_for(subsection_index: int, difficulty: str) -> str:
        return f"{subsection_index}_{difficulty}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Quiz":
        questions = data.get("questions") or []
        return cls(
            questions=list(questions),
            difficulty=data.get("difficulty") or "medium",
            subsection_title=data.get("subsectionTitle") or "",
            formatted_subsection_title=data.get("formattedSubsectionTitle"),
            total_questions=data.get("totalQuestions", len(questions)),
            generated_with=data.get("generatedWith"),
            created_at=data.get("createdAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "questions": self.questions,
            "difficulty": self.difficulty,
            "subsectionTitle": self.subsection_title,
            "totalQuestions": self.total_questions,
            "generatedWith": self.generated_with,
        }
        if self.formatted_subsection_title is not None:
            data["formattedSubsectionTitle"] = self.formatted_subsection_title
        if self.created_at is not None:
            data["createdAt"] = self.created_at
        return data


@dataclass
class Module:
    """Unit of course content"""
    title: str = ""
    summary: str = ""
    content: str = ""  # Markdown with #..#### headings

    # Educational elements
    objectives: List[str] = field(default_factory=list)
    examples: List[str] = field(default_factory=list)

    # Subsection records keep the backend's loose shape; see classifier
    detailed_subsections: List[Dict[str, Any]] = field(default_factory=list)
    subsection_quizzes: Dict[str, Quiz] = field(default_factory=dict)
    assignments: List[Dict[str, Any]] = field(default_factory=list)
    resources: Dict[str, List[Resource]] = field(default_factory=dict)

    # Metadata
    order: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    _KEYS = (
        "title", "summary", "content", "objectives", "examples",
        "detailedSubsections", "subsectionQuizzes", "assignments",
        "resources", "order",
    )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Module":
        resources = {}
        for category, items in (data.get("resources") or {}).items():
            if isinstance(items, list):
                resources[category] = [
                    Resource.from_dict(item) for item in items if isinstance(item, dict)
                ]
        quizzes = {
            key: Quiz.from_dict(quiz)
            for key, quiz in (data.get("subsectionQuizzes") or {}).items()
            if isinstance(quiz, dict)
        }
        return cls(
            title=data.get("title") or "",
            summary=data.get("summary") or "",
            content=data.get("content") or "",
            objectives=list(data.get("objectives") or []),
            examples=list(data.get("examples") or []),
            detailed_subsections=[
                dict(sub) for sub in (data.get("detailedSubsections") or [])
                if isinstance(sub, dict)
            ],
            subsection_quizzes=quizzes,
            assignments=list(data.get("assignments") or []),
            resources=resources,
            order=data.get("order"),
            extra=_extra(data, cls._KEYS),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data.update({
            "title": self.title,
            "summary": self.summary,
            "content": self.content,
            "objectives": list(self.objectives),
            "examples": list(self.examples),
            "detailedSubsections": self.detailed_subsections,
            "subsectionQuizzes": {k: q.to_dict() for k, q in self.subsection_quizzes.items()},
            "assignments": self.assignments,
            "resources": {
                category: [r.to_dict() for r in items]
                for category, items in self.resources.items()
            },
        })
        if self.order is not None:
            data["order"] = self.order
        return data
