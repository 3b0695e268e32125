from __future__ import annotations

from typing import Any, Mapping, Optional

import pytest

from staticpages.config import PagesConfig
from staticpages.pages.context import PageContext
from staticpages.sources.base import ContentRecord, PageView
from staticpages.sources.memory import MemorySource
from staticpages.sources.registry import SourceRegistry


class CountingSource(MemorySource):
    """In-memory source recording every call made by templates."""

    name = "counting"

    def __init__(self) -> None:
        super().__init__()
        self.config: Optional[dict[str, Any]] = None
        self.fetch_calls: list[tuple[Optional[str], str, str]] = []
        self.store_calls: list[str] = []
        self.store_result = True
        self.close_calls = 0

    def set_config(self, config: Mapping[str, Any]) -> None:
        self.config = dict(config)

    def fetch(self, page_type: Optional[str], name: str, locale: str) -> Optional[ContentRecord]:
        self.fetch_calls.append((page_type, name, locale))
        return super().fetch(page_type, name, locale)

    def close(self) -> None:
        self.close_calls += 1

    def store(self, page: PageView, locale: str) -> bool:
        self.store_calls.append(locale)
        if not self.store_result:
            return False
        return super().store(page, locale)


@pytest.fixture
def source() -> CountingSource:
    return CountingSource()


@pytest.fixture
def context(source: CountingSource) -> PageContext:
    config = PagesConfig(
        default_source="counting",
        default_locale="en",
        sources={"counting": {"flag": "on"}},
    )
    registry = SourceRegistry({"counting": lambda: source, "memory": MemorySource})
    return PageContext(config=config, registry=registry)
