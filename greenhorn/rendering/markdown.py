"""Markdown to HTML conversion."""

from __future__ import annotations

from typing import Any, cast

import mistune

# Pages are embedded below the template's own <h1>, so "#" becomes <h2>.
_HEADING_OFFSET = 1
_MAX_HEADING_LEVEL = 6


class _PageRenderer(mistune.HTMLRenderer):
    """HTML renderer that passes raw HTML and every link scheme through, demoting headings."""

    def __init__(self) -> None:
        super().__init__(escape=False, allow_harmful_protocols=True)

    def heading(self, text: str, level: int, **attrs: Any) -> str:
        tag = f"h{min(level + _HEADING_OFFSET, _MAX_HEADING_LEVEL)}"
        return f"<{tag}>{text}</{tag}>\n"


_markdown = mistune.create_markdown(
    renderer=_PageRenderer(),
    plugins=["strikethrough", "table"],
)


def markdown_to_html(text: str) -> str:
    """Convert markdown to an HTML fragment.

    Supports CommonMark plus ``~~strikethrough~~`` and pipe tables. The output
    is not sanitized: page sources are written by the site's authors.
    """
    return cast("str", _markdown(text))
