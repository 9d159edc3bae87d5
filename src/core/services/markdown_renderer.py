"""
Minimal markdown-to-HTML rendering for assistant replies.

Text is HTML-escaped before any markup is introduced, so model output can
never inject tags of its own. Only bold, italic and bullet lists are
recognized.
"""

import re

_ESCAPES = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#039;",
})

_BOLD = re.compile(r"\*\*(.+?)\*\*")
_ITALIC = re.compile(r"\*(.+?)\*")


def escape_html(text: str) -> str:
    return text.translate(_ESCAPES)


def _bullet_item(line: str) -> str | None:
    stripped = line.strip()
    if stripped.startswith("- ") or stripped.startswith("* "):
        return stripped[2:]
    return None


def _inline(text: str) -> str:
    text = _BOLD.sub(r"<strong>\1</strong>", text)
    return _ITALIC.sub(r"<em>\1</em>", text)


def render_markdown(text: str | None) -> str:
    """
    Render assistant text as safe HTML.

    Blank lines are dropped and the remaining lines joined with <br>.

    Args:
        text: Raw assistant reply

    Returns:
        HTML fragment with <strong>, <em>, <ul>/<li> and <br> only
    """
    if not text:
        return ""

    parts: list[str] = []
    items: list[str] = []

    for line in escape_html(text.replace("\r\n", "\n")).split("\n"):
        item = _bullet_item(line)
        if item is not None:
            items.append(f"<li>{_inline(item)}</li>")
            continue

        # Each run of bullets becomes one <ul> block
        if items:
            parts.append("<ul>" + "".join(items) + "</ul>")
            items = []
        if line.strip():
            parts.append(_inline(line))

    if items:
        parts.append("<ul>" + "".join(items) + "</ul>")

    return "<br>".join(parts)
