"""
Shields LaTeX math spans from text transforms.

Markdown and HTML rewrites would corrupt `_`, `*`, `<` and `\\` inside
formulas. protect() swaps every math span for an inert token; restore()
puts the span back in canonical \\( \\) / \\[ \\] form.
"""
import re
from typing import Callable, Dict, Iterable, List

from models.content_models import MathSpan, ProtectedText

# Block math first: $$...$$ or \[...\], newlines allowed
BLOCK_MATH_RE = re.compile(r"\$\$([\s\S]+?)\$\$|\\\[([\s\S]+?)\\\]")
# Inline math: $...$ (single line, not an escaped \$) or \(...\)
INLINE_MATH_RE = re.compile(r"(?<!\\)\$([^$\n]+?)\$|\\\(([^\n]+?)\\\)")

# Canonical delimiters only, for HTML where a stray $ may sit between tags
BLOCK_BACKSLASH_RE = re.compile(r"\\\[([\s\S]+?)\\\]")
INLINE_BACKSLASH_RE = re.compile(r"\\\(([^\n]+?)\\\)")

TOKEN_RE = re.compile(r"__MATH_(?:INLINE|BLOCK)_\d+__")

INLINE = "inline"
BLOCK = "block"


def canonical(content: str, kind: str) -> str:
    """Wrap raw LaTeX in the delimiters KaTeX auto-render expects."""
    if kind == BLOCK:
        return f"\\[{content}\\]"
    return f"\\({content}\\)"


def protect(text: str, dollars: bool = True) -> ProtectedText:
    """Replace math spans with __MATH_{KIND}_{N}__ tokens.

    With dollars=False only \\( \\) and \\[ \\] spans are recognised.
    """
    if not text:
        return ProtectedText(shielded=text or "", spans=[])

    spans = []

    def _shield(kind: str):
        def _replace(match: re.Match) -> str:
            content = next(g for g in match.groups() if g is not None)
            placeholder = f"__MATH_{kind.upper()}_{len(spans)}__"
            spans.append(MathSpan(
                placeholder=placeholder,
                original=canonical(content, kind),
                kind=kind,
                source=match.group(0),
            ))
            return placeholder
        return _replace

    block_re, inline_re = (
        (BLOCK_MATH_RE, INLINE_MATH_RE) if dollars else (BLOCK_BACKSLASH_RE, INLINE_BACKSLASH_RE)
    )
    shielded = block_re.sub(_shield(BLOCK), text)
    shielded = inline_re.sub(_shield(INLINE), shielded)
    return ProtectedText(shielded=shielded, spans=spans)


def restore(shielded: str, spans: Iterable[MathSpan]) -> str:
    """Swap tokens back for their math; unknown tokens are left alone."""
    if not shielded:
        return shielded or ""
    lookup: Dict[str, str] = {span.placeholder: span.original for span in spans}
    if not lookup:
        return shielded
    return TOKEN_RE.sub(lambda m: lookup.get(m.group(0), m.group(0)), shielded)


def canonicalize_math(text: str) -> str:
    """Rewrite every math span of `text` into canonical delimiters."""
    protected = protect(text)
    return restore(protected.shielded, protected.spans)


# Private-use stand-ins for tokens while a markdown library runs, since
# `__MATH_INLINE_0__` reads as strong emphasis to a markdown parser
STANDIN_RE = re.compile(r"\ue000(\d+)\ue001")


def opaque(protected: ProtectedText) -> str:
    """Shielded text with tokens swapped for markup-neutral stand-ins."""
    text = protected.shielded
    for n, span in enumerate(protected.spans):
        text = text.replace(span.placeholder, f"\ue000{n}\ue001")
    return text


def reveal(text: str, spans: List[MathSpan], render: Callable[[str], str] = str) -> str:
    """Replace stand-ins with their canonical math, passed through `render`."""
    def _replace(match: re.Match) -> str:
        n = int(match.group(1))
        return render(spans[n].original) if n < len(spans) else match.group(0)
    return STANDIN_RE.sub(_replace, text)
