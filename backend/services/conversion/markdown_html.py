"""
Markdown -> HTML conversion for page bodies.

Rendering is done by markdown-it (CommonMark, single newlines as <br>).
Math is shielded by math_protector around the render and emitted in
canonical \\( \\) / \\[ \\] form so the result renders directly in a
KaTeX viewer.
"""
import html
import re
from typing import List

from markdown_it import MarkdownIt

from services.conversion.math_protector import protect, opaque, reveal

md = MarkdownIt("commonmark", {"breaks": True})

# Fenced blocks and inline code spans; `$` inside them is literal
CODE_RE = re.compile(r"^(`{3,}|~{3,})[^\n]*\n[\s\S]*?^\1[ \t]*$|`[^`\n]+`", re.MULTILINE)
CODE_TOKEN_RE = re.compile(r"\ue002(\d+)\ue003")


def to_html(markdown: str) -> str:
    """Convert markdown to HTML. Empty input gives an empty string."""
    if not markdown or not markdown.strip():
        return ""

    code: List[str] = []

    def _set_aside(match: re.Match) -> str:
        code.append(match.group(0))
        return f"\ue002{len(code) - 1}\ue003"

    text = CODE_RE.sub(_set_aside, markdown.replace("\r\n", "\n"))
    protected = protect(text)
    text = CODE_TOKEN_RE.sub(lambda m: code[int(m.group(1))], opaque(protected))

    rendered = md.render(text)
    return reveal(rendered, protected.spans, lambda math: html.escape(math, quote=False)).strip()
