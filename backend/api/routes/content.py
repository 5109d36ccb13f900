"""
Content pipeline API routes: conversion, classification and structure.
"""
import logging
from fastapi import APIRouter

from api.models.requests import MarkdownRequest, HtmlRequest, ClassifyRequest, StructureRequest
from api.models.responses import HtmlResponse, MarkdownResponse, ContentViewResponse, StructureResponse
from services.conversion.markdown_html import to_html
from services.conversion.html_markdown import to_markdown
from services.normalization.classifier import classify
from services.normalization.headings import parse_headings, merge_subsections

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/to-html", response_model=HtmlResponse)
async def markdown_to_html(request: MarkdownRequest):
    """Convert markdown to HTML with math in canonical delimiters."""
    return HtmlResponse(html=to_html(request.markdown))


@router.post("/to-markdown", response_model=MarkdownResponse)
async def html_to_markdown(request: HtmlRequest):
    """Convert HTML back to markdown."""
    return MarkdownResponse(markdown=to_markdown(request.html))


@router.post("/classify", response_model=ContentViewResponse)
async def classify_subsection(request: ClassifyRequest):
    """Map a raw subsection record onto its content variant."""
    view = classify(request.subsection)
    return view.to_dict()


@router.post("/structure", response_model=StructureResponse)
async def module_structure(request: StructureRequest):
    """
    Parse the heading hierarchy of module content and merge in the
    AI-generated subsection records.
    """
    structure = parse_headings(request.content)
    views = merge_subsections(structure, request.detailed_subsections)
    logger.debug(f"Structure request produced {len(views)} subsections")
    return {
        "units": structure.units,
        "sections": structure.sections,
        "subsections": [view.to_dict() for view in views],
    }
