"""
Pydantic request models for API endpoints.
"""
from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any


class MarkdownRequest(BaseModel):
    """Request model for Markdown -> HTML conversion."""
    markdown: str = Field(default="", description="Markdown body, may contain LaTeX math")


class HtmlRequest(BaseModel):
    """Request model for HTML -> Markdown conversion."""
    html: str = Field(default="", description="HTML body")


class ClassifyRequest(BaseModel):
    """Request model for subsection classification."""
    subsection: Dict[str, Any] = Field(default_factory=dict, description="Raw subsection record")


class StructureRequest(BaseModel):
    """Request model for heading structure extraction."""
    content: str = Field(default="", description="Module markdown with #..#### headings")
    detailed_subsections: Optional[List[Dict[str, Any]]] = Field(
        default=None,
        alias="detailedSubsections",
        description="AI-generated subsection records to merge",
    )

    model_config = {"populate_by_name": True}
