"""
Orchestrates generation and save calls against the course backend and
applies their results to modules.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from core.backend_client import BackendClient, BackendError
from core.config import (
    DEFAULT_ACADEMIC_LEVEL,
    DEFAULT_QUIZ_PROVIDER,
    DEFAULT_SUBJECT,
)
from core.notifications import Notifier
from models.course_models import Module, Quiz
from services.editor.module_editor import ModuleEditor

logger = logging.getLogger(__name__)

MIN_QUIZ_SOURCE_CHARS = 10


class CourseGenerator:
    """Generation/save front end. Failures are notified, never raised."""

    def __init__(self, client: Optional[BackendClient] = None, notifier: Optional[Notifier] = None):
        self.client = client or BackendClient()
        self.notifier = notifier or Notifier()

    def generate_curriculum(self, request: Dict[str, Any]) -> Optional[str]:
        """Return the generated curriculum text, or None on failure."""
        try:
            data = self.client.generate_curriculum(request)
        except BackendError as e:
            self.notifier.error(e.message)
            return None

        curriculum = data.get("curriculum")
        if not isinstance(curriculum, str) or not curriculum.strip():
            self.notifier.error("Curriculum generation returned no curriculum")
            return None
        self.notifier.success("Curriculum generated")
        return curriculum

    def process_curriculum(self, curriculum: str, course_data: Dict[str, Any]) -> List[Module]:
        """Split a curriculum into modules; empty list on failure."""
        try:
            data = self.client.process_curriculum(curriculum, course_data)
        except BackendError as e:
            self.notifier.error(e.message)
            return []

        modules = [
            Module.from_dict(item)
            for item in (data.get("modules") or [])
            if isinstance(item, dict)
        ]
        logger.info(f"Processed curriculum into {len(modules)} modules")
        return modules

    def generate_detailed_content(
        self,
        editor: ModuleEditor,
        course_id: str,
        module_index: int,
        academic_level: str = DEFAULT_ACADEMIC_LEVEL,
        subject: str = DEFAULT_SUBJECT,
    ) -> bool:
        """Fetch detailed subsections and store them on the editor's module."""
        try:
            data = self.client.generate_detailed_content(
                course_id, module_index, academic_level, subject
            )
        except BackendError as e:
            self.notifier.error(e.message)
            return False

        subsections = data.get("detailedSubsections")
        if not isinstance(subsections, list):
            self.notifier.error("Detailed content response was malformed")
            return False

        editor.set_detailed_subsections(subsections)
        total_pages = data.get("totalPages")
        if total_pages is None:
            total_pages = sum(
                len(s.get("pages") or []) for s in subsections if isinstance(s, dict)
            )
        self.notifier.success(
            f"Generated {data.get('totalSubsections', len(subsections))} detailed "
            f"subsections with {total_pages} pages!"
        )
        return True

    def generate_quiz(
        self,
        editor: ModuleEditor,
        subsection_index: int,
        difficulty: str,
        academic_level: str = DEFAULT_ACADEMIC_LEVEL,
        subject: str = DEFAULT_SUBJECT,
        semester: Optional[str] = None,
        provider: str = DEFAULT_QUIZ_PROVIDER,
    ) -> Optional[Quiz]:
        """Generate a quiz for one subsection and store it on the module."""
        subsections = editor.module.detailed_subsections
        if not 0 <= subsection_index < len(subsections):
            self.notifier.error(f"Subsection {subsection_index + 1} not found")
            return None
        subsection = subsections[subsection_index]
        title = subsection.get("title")
        if not title:
            self.notifier.error("Subsection title is required for quiz generation")
            return None

        source = quiz_source_text(subsection)
        if len(source.strip()) < MIN_QUIZ_SOURCE_CHARS:
            source = fallback_quiz_source(subsection, academic_level, subject, semester)

        context = {
            "concept": title,
            "academicLevel": academic_level,
            "subject": subject,
            "semester": difficulty,  # the learner level doubles as semester
        }
        try:
            data = self.client.generate_quiz(source.strip(), difficulty, context, provider)
        except BackendError as e:
            self.notifier.error(e.message)
            return None

        questions = data.get("questions") or []
        metadata = data.get("metadata") or {}
        quiz = Quiz(
            questions=list(questions),
            difficulty=difficulty,
            subsection_title=title,
            formatted_subsection_title=subsection.get("formattedTitle"),
            total_questions=len(questions),
            generated_with=metadata.get("generatedWith") or provider,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        editor.set_subsection_quiz(subsection_index, quiz)
        self.notifier.success(f"{difficulty.capitalize()} quiz created for {title}")
        return quiz

    def save_course(self, course: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Persist a course; returns the backend response or None on failure."""
        try:
            data = self.client.save_course(course)
        except BackendError as e:
            self.notifier.error(e.message)
            return None
        self.notifier.success("Course saved")
        return data

    def save_module(self, module: Module) -> None:
        """Persist callback for ModuleEditor; raises BackendError on failure."""
        self.client.save_course(module.to_dict())


def quiz_source_text(subsection: Dict[str, Any]) -> str:
    """Collect every text field of a subsection into one quiz prompt body."""
    parts = []
    if subsection.get("title"):
        parts.append(f"Topic: {subsection['title']}")
    if subsection.get("summary"):
        parts.append(f"Summary: {subsection['summary']}")
    if isinstance(subsection.get("keyPoints"), list):
        parts.append(f"Key Points: {', '.join(str(p) for p in subsection['keyPoints'])}")
    if subsection.get("generatedMarkdown"):
        parts.append(subsection["generatedMarkdown"])

    for n, page in enumerate(subsection.get("pages") or [], start=1):
        if not isinstance(page, dict):
            continue
        if (page.get("content") or "").strip():
            parts.append(f"Page {n}: {page['content']}")
        if (page.get("keyTakeaway") or "").strip():
            parts.append(f"Key Takeaway {n}: {page['keyTakeaway']}")

    for key, label in (("conceptFlashCards", "Concepts"), ("formulaFlashCards", "Formulas")):
        cards = subsection.get(key)
        if isinstance(cards, list):
            text = " ".join(
                f"{c.get('question', '')} {c.get('answer', '')}" for c in cards if isinstance(c, dict)
            )
            if text.strip():
                parts.append(f"{label}: {text}")

    for key, label in (
        ("practicalExample", "Practical Example"),
        ("commonPitfalls", "Common Pitfalls"),
        ("explanation", "Explanation"),
        ("content", "Content"),
        ("details", "Details"),
    ):
        if subsection.get(key):
            parts.append(f"{label}: {subsection[key]}")

    return "\n\n".join(parts)


def fallback_quiz_source(
    subsection: Dict[str, Any],
    academic_level: str,
    subject: str,
    semester: Optional[str],
) -> str:
    topic = subsection.get("title") or "the topic"
    return (
        f"Topic: {topic}\n"
        f"Subject: {subject or 'General'}\n"
        f"Academic Level: {academic_level or 'Undergraduate'}\n"
        f"Semester: {semester or '1'}\n\n"
        f"This subsection covers important concepts related to {topic} "
        f"in the context of {subject or 'the subject area'} for {academic_level or 'academic courses'}.\n\n"
        "Key areas of focus include fundamental principles, practical applications, "
        "and academic strategies for mastering this topic."
    )
