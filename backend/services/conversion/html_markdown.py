"""
HTML -> Markdown conversion, used when an editor toggles from HTML back
to Markdown. Conversion is done by markdownify with canonical math
shielded around it.
"""
import html
import re
import warnings

from bs4 import BeautifulSoup
from markdownify import markdownify, ATX

from services.conversion.math_protector import protect, opaque, reveal

EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")

HTML_TAGS = {
    "p", "br", "div", "span", "h1", "h2", "h3", "h4", "h5", "h6", "strong",
    "b", "em", "i", "u", "ul", "ol", "li", "a", "img", "pre", "code",
    "blockquote", "table", "thead", "tbody", "tr", "td", "th", "hr", "sup",
    "sub", "section", "article",
}


def to_markdown(html_text: str) -> str:
    """Convert HTML to markdown. Empty input gives an empty string."""
    if not html_text or not html_text.strip():
        return ""

    # Only \( \) / \[ \] here: a bare $ in HTML text may sit between tags
    protected = protect(html_text.replace("\r\n", "\n"), dollars=False)
    converted = markdownify(
        opaque(protected),
        heading_style=ATX,
        bullets="-",
        escape_misc=False,
        code_language_callback=_code_language,
    )

    text = "\n".join(line.rstrip() for line in converted.split("\n"))
    text = EXCESS_NEWLINES_RE.sub("\n\n", text).strip()
    # math was captured from HTML source, so entities such as &lt; decode here
    return reveal(text, protected.spans, html.unescape)


def looks_like_html(text: str) -> bool:
    """True when `text` contains at least one recognised HTML element.

    Math is shielded first so comparisons such as \\(a<b\\) are not
    mistaken for tags.
    """
    if not text or "<" not in text:
        return False
    shielded = protect(text).shielded
    with warnings.catch_warnings():
        # bs4 warns when short markup looks like a URL or filename
        warnings.simplefilter("ignore", UserWarning)
        soup = BeautifulSoup(shielded, "html.parser")
    return soup.find(lambda tag: tag.name in HTML_TAGS) is not None


def _code_language(el):
    """Fence language from a <pre><code class="language-x"> block."""
    code = el.find("code")
    if code is None:
        return None
    for name in code.get("class") or []:
        if name.startswith("language-"):
            return name[len("language-"):]
    return None
