"""Plain-text to HTML rendering with wikilink substitution."""

import re

from markupsafe import Markup, escape

from flatwiki.models.page import TITLE_PATTERN

# A bracketed page title such as ``[FrontPage]``.  Brackets are not
# HTML-special, so the pattern still matches after escaping.
_WIKILINK_RE = re.compile(rf"\[({TITLE_PATTERN})\]")


def _link(match: re.Match) -> str:
    title = match.group(1)
    return f'<a href="/view/{title}">{title}</a>'


def render_body(body: bytes | str) -> Markup:
    """Render a raw page body as an HTML fragment.

    The body is escaped first so nothing in it is interpreted as markup
    (NUL becomes U+FFFD).
    Bracketed titles in the escaped text then become links to their view
    page, and every newline becomes ``<br>``.  The result is ``Markup`` and
    is embedded by templates as-is.
    """
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")

    # NUL is not valid in HTML text; it renders as the replacement character.
    escaped = str(escape(body.replace("\x00", "\ufffd")))
    linked = _WIKILINK_RE.sub(_link, escaped)
    return Markup(linked.replace("\n", "<br>"))
