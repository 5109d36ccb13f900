"""
Pydantic response models for API endpoints.
"""
from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any


class HtmlResponse(BaseModel):
    """Response model for Markdown -> HTML conversion."""
    html: str


class MarkdownResponse(BaseModel):
    """Response model for HTML -> Markdown conversion."""
    markdown: str


class ContentViewResponse(BaseModel):
    """Normalized content variant of a subsection."""
    type: str = Field(..., description="pages | flashcards | categorizedFlashcards | empty")
    data: Dict[str, Any]


class SubsectionResponse(BaseModel):
    """Parsed subsection merged with its AI record."""
    number: str
    name: str
    title: str
    formattedTitle: str
    unit: str
    unitContext: str = ""
    sourceIndex: Optional[int] = None
    content: ContentViewResponse


class StructureResponse(BaseModel):
    """Heading hierarchy of a module."""
    units: Dict[str, str] = {}
    sections: Dict[str, str] = {}
    subsections: List[SubsectionResponse] = []
