"""
Data models for in-progress page edits.
"""
from dataclasses import dataclass
from enum import Enum


class EditMode(Enum):
    """Format of the body being edited."""
    HTML = "html"
    MARKDOWN = "markdown"


@dataclass
class EditSession:
    """Open edit of one page of one subsection"""
    subsection_index: int
    page_index: int
    content: str = ""
    title: str = ""
    takeaway: str = ""
    edit_mode: EditMode = EditMode.MARKDOWN
