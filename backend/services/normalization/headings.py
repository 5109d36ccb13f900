"""
Heading-hierarchy parser.

Module content is markdown whose headings encode the course outline:

    # Unit 1: Foundations
    ### 1.1 Basics
    #### 1.1.1 Intro

parse_headings() recovers units, sections and subsections from it, and
merge_subsections() pairs each parsed subsection with the AI-generated
record carrying the same number.
"""
import logging
import re
from typing import Any, Dict, List, Optional

from models.content_models import HeadingStructure, ParsedSubsection, SubsectionView
from services.normalization.classifier import classify

logger = logging.getLogger(__name__)

UNIT_RE = re.compile(r"^#+\s*(?:Unit|Chapter)\s*(\d+)[:\s]*(.*)$", re.IGNORECASE)
SECTION_RE = re.compile(r"^###\s+([\d.]+)\s+(.*)$")
SUBSECTION_RE = re.compile(r"^####\s+([\d.]+)\s+(.*)$")
NUMBER_PREFIX_RE = re.compile(r"^\s*([\d.]+)")


def parse_headings(markdown: str) -> HeadingStructure:
    """Parse unit, section and subsection headings out of markdown."""
    structure = HeadingStructure()
    if not markdown:
        return structure

    lines = [line.strip() for line in markdown.replace("\r\n", "\n").split("\n")]

    # Units and sections first, so a subsection can resolve its parents
    # regardless of heading order
    for line in lines:
        unit = UNIT_RE.match(line)
        if unit:
            structure.units[unit.group(1)] = unit.group(2).strip()
            continue
        section = SECTION_RE.match(line)
        if section:
            structure.sections[_normalize(section.group(1))] = section.group(2).strip()

    for line in lines:
        match = SUBSECTION_RE.match(line)
        if not match:
            continue
        number = _normalize(match.group(1))
        unit = number.split(".")[0]
        unit_title = structure.units.get(unit, "")
        parent = ".".join(number.split(".")[:2])
        structure.subsections.append(ParsedSubsection(
            number=number,
            name=match.group(2).strip(),
            unit=unit,
            unit_title=unit_title,
            unit_context=f"Unit {unit}: {unit_title}" if unit in structure.units else "",
            section_title=structure.sections.get(parent, ""),
        ))

    logger.debug(
        f"Parsed {len(structure.units)} units, {len(structure.sections)} sections, "
        f"{len(structure.subsections)} subsections"
    )
    return structure


def merge_subsections(
    structure: HeadingStructure,
    detailed_subsections: Optional[List[Dict[str, Any]]],
) -> List[SubsectionView]:
    """
    Pair parsed subsections with AI records by leading number.

    AI records whose number matches no heading are left out; headings
    without a record get the empty content view.
    """
    by_number: Dict[str, int] = {}
    for index, record in enumerate(detailed_subsections or []):
        if not isinstance(record, dict):
            continue
        number = _number_prefix(record.get("title"))
        if number and number not in by_number:
            by_number[number] = index

    views = []
    for parsed in structure.subsections:
        source_index = by_number.get(parsed.number)
        if source_index is not None:
            content = classify(detailed_subsections[source_index])
        else:
            content = classify({"title": parsed.title})
        views.append(SubsectionView(
            number=parsed.number,
            name=parsed.name,
            title=parsed.title,
            formatted_title=parsed.formatted_title,
            unit=parsed.unit,
            unit_context=parsed.unit_context,
            content=content,
            source_index=source_index,
        ))
    return views


def _number_prefix(title: Any) -> Optional[str]:
    if not isinstance(title, str):
        return None
    match = NUMBER_PREFIX_RE.match(title)
    if not match:
        return None
    return _normalize(match.group(1)) or None


def _normalize(number: str) -> str:
    return number.rstrip(".")
