"""
Splits a markdown body into pages at `####` headings.
"""
import re
from typing import List

from models.course_models import Page

PAGE_HEADING_RE = re.compile(r"^####\s+(.*)$")


def split_markdown_pages(markdown: str) -> List[Page]:
    """
    Split markdown into pages, one per `####` heading.

    Text before the first heading becomes an "Introduction" page. Without
    any heading the whole body is a single "Content" page. Empty input
    gives no pages.
    """
    if not markdown or not markdown.strip():
        return []

    pages: List[Page] = []
    title = None
    buffer: List[str] = []

    def flush():
        body = "\n".join(buffer).strip()
        if title is not None or body:
            name = title if title is not None else "Introduction"
            pages.append(Page(title=name, page_title=name, content=body))

    for line in markdown.replace("\r\n", "\n").split("\n"):
        match = PAGE_HEADING_RE.match(line)
        if match:
            flush()
            title = match.group(1).strip() or f"Page {len(pages) + 1}"
            buffer = []
        else:
            buffer.append(line)
    flush()

    if len(pages) == 1 and title is None:
        pages[0].title = pages[0].page_title = "Content"

    for n, page in enumerate(pages, start=1):
        page.page_number = n
    return pages
