"""Dictionary-backed content source."""

from __future__ import annotations

import copy
from typing import Optional

from .base import ContentRecord, ContentSource, PageView, snapshot

RecordKey = tuple[Optional[str], str, str]


class MemorySource(ContentSource):
    """Keep records in a dict keyed by ``(page_type, name, locale)``.

    Content lives as long as the instance; register a shared instance with
    the registry when several pages must see each other's writes.
    """

    name = "memory"

    def __init__(self, pages: Optional[dict[RecordKey, ContentRecord]] = None) -> None:
        self.pages: dict[RecordKey, ContentRecord] = pages if pages is not None else {}

    def put(self, page_type: Optional[str], name: str, locale: str, record: ContentRecord) -> None:
        self.pages[(page_type, name, locale)] = record

    def fetch(self, page_type: Optional[str], name: str, locale: str) -> Optional[ContentRecord]:
        record = self.pages.get((page_type, name, locale))
        return copy.deepcopy(record) if record is not None else None

    def store(self, page: PageView, locale: str) -> bool:
        if not page.name:
            return False
        self.pages[(page.page_type, page.name, locale)] = copy.deepcopy(snapshot(page, locale))
        return True
