"""Transforms applied to attribute values when reading them from a page."""

from __future__ import annotations

from typing import Optional

from markdown_it import MarkdownIt


class MarkdownRenderer:
    """Render Markdown attribute values to HTML; usable as ``page.get(name, renderer)``."""

    def __init__(self) -> None:
        self._markdown = MarkdownIt("commonmark", {"html": True})

    def __call__(self, value: object) -> Optional[str]:
        if value is None:
            return None
        return self._markdown.render(str(value))
