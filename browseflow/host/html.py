"""Reduce an HTML document to the readable text it carries."""

from __future__ import annotations

import re
from html.parser import HTMLParser
from typing import List

_SKIPPED_TAGS = {"script", "style", "noscript", "template", "svg", "head", "iframe"}
_BLOCK_TAGS = {
    "p", "div", "section", "article", "main", "header", "footer", "li", "ul",
    "ol", "br", "tr", "table", "h1", "h2", "h3", "h4", "h5", "h6", "pre",
    "blockquote",
}


class _TextExtractor(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._parts: List[str] = []
        self._skip_depth = 0

    def handle_starttag(self, tag, attrs):
        if tag in _SKIPPED_TAGS:
            self._skip_depth += 1
        elif tag in _BLOCK_TAGS:
            self._parts.append("\n")

    def handle_endtag(self, tag):
        if tag in _SKIPPED_TAGS:
            self._skip_depth = max(0, self._skip_depth - 1)
        elif tag in _BLOCK_TAGS:
            self._parts.append("\n")

    def handle_data(self, data):
        if not self._skip_depth:
            self._parts.append(data)

    def text(self) -> str:
        return "".join(self._parts)


def clean_html(document: str) -> str:
    """Return the visible text of ``document`` with whitespace collapsed."""
    parser = _TextExtractor()
    parser.feed(document)
    parser.close()
    lines = (re.sub(r"[ \t\r\f\v]+", " ", line).strip() for line in parser.text().split("\n"))
    return "\n".join(line for line in lines if line)
