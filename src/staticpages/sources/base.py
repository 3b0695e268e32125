"""Contract every content backend must satisfy."""

from __future__ import annotations

import abc
from datetime import datetime
from typing import Any, ClassVar, Mapping, Optional, Protocol, TypedDict


class ContentRecord(TypedDict, total=False):
    """Raw page content as exchanged with a source. Every key is optional."""

    title: Optional[str]
    attributes: dict[str, Any]
    created_at: Any
    updated_at: Any


class PageView(Protocol):
    """Read-only surface of a page handed to :meth:`ContentSource.store`."""

    @property
    def name(self) -> Optional[str]: ...

    @property
    def page_type(self) -> Optional[str]: ...

    @property
    def key(self) -> str: ...

    def get_localized(self, locale: str) -> dict[str, Any]: ...

    def get_localized_title(self, locale: str) -> Optional[str]: ...

    def get_date(self, moment: str = "created_at") -> Optional[datetime]: ...


class ContentSource(abc.ABC):
    """Fetch and persist page content for a ``(page_type, name, locale)`` triple."""

    name: ClassVar[str]

    def get_name(self) -> str:
        return self.name

    def set_config(self, config: Mapping[str, Any]) -> None:
        """Receive backend-specific settings. Sources without settings ignore them."""

    def close(self) -> None:
        """Release connections or handles held by the source."""

    @abc.abstractmethod
    def fetch(self, page_type: Optional[str], name: str, locale: str) -> Optional[ContentRecord]:
        """Return the stored record, or ``None`` when nothing exists for the triple."""

    @abc.abstractmethod
    def store(self, page: PageView, locale: str) -> bool:
        """Persist ``page`` for ``locale`` and report whether it succeeded."""


def snapshot(page: PageView, locale: str) -> ContentRecord:
    """Build the record describing ``page`` in ``locale``."""

    record: ContentRecord = {
        "title": page.get_localized_title(locale),
        "attributes": page.get_localized(locale),
    }
    for moment in ("created_at", "updated_at"):
        value = page.get_date(moment)
        if value is not None:
            record[moment] = value
    return record
