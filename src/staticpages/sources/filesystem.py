"""Store page content as one JSON document per page and locale."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from staticpages.exceptions import InvalidDateError
from staticpages.pages.dates import parse_date, utcnow

from .base import ContentRecord, ContentSource, PageView

logger = logging.getLogger(__name__)


class FilesystemSourceConfig(BaseModel):
    """Settings read from ``[sources.filesystem]``."""

    path: Path = Field(Path("pages"), description="Root directory holding the page files")
    extension: str = Field(".json", description="File suffix of page files")
    indent: Optional[int] = Field(2, description="Indentation of written documents")


class PageDocument(BaseModel):
    """On-disk representation of one page in one locale."""

    title: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    attributes: dict[str, Any] = Field(default_factory=dict)

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: object) -> Optional[datetime]:
        return parse_date(value)

    def to_record(self) -> ContentRecord:
        record: ContentRecord = {"title": self.title, "attributes": dict(self.attributes)}
        if self.created_at is not None:
            record["created_at"] = self.created_at
        if self.updated_at is not None:
            record["updated_at"] = self.updated_at
        return record


class FilesystemSource(ContentSource):
    """One file per page at ``{path}/{locale}/{page_type}/{name}{extension}``."""

    name = "filesystem"

    def __init__(self) -> None:
        self.config = FilesystemSourceConfig()

    def set_config(self, config: Mapping[str, Any]) -> None:
        self.config = FilesystemSourceConfig.model_validate(dict(config))

    @property
    def root(self) -> Path:
        return self.config.path

    def page_path(self, page_type: Optional[str], name: str, locale: str) -> Path:
        """Return the file holding a page, refusing paths outside of the root."""

        base = self.root.resolve()
        parts = [locale] + ([page_type] if page_type else []) + [name + self.config.extension]
        candidate = base.joinpath(*parts).resolve()
        if not candidate.is_relative_to(base):
            raise ValueError(f"Page path {candidate} is outside of source root {self.root}")
        return candidate

    def fetch(self, page_type: Optional[str], name: str, locale: str) -> Optional[ContentRecord]:
        path = self.page_path(page_type, name, locale)
        if not path.exists():
            logger.debug("No page file at %s", path)
            return None

        try:
            document = PageDocument.model_validate_json(path.read_text(encoding="utf-8"))
        except ValidationError as exc:
            for error in exc.errors():
                cause = error.get("ctx", {}).get("error")
                if isinstance(cause, InvalidDateError):
                    raise cause from exc
            raise
        return document.to_record()

    def store(self, page: PageView, locale: str) -> bool:
        if not page.name:
            return False
        path = self.page_path(page.page_type, page.name, locale)
        path.parent.mkdir(parents=True, exist_ok=True)

        document = PageDocument(
            title=page.get_localized_title(locale),
            created_at=page.get_date("created_at"),
            updated_at=utcnow(),
            attributes=page.get_localized(locale),
        )
        path.write_text(document.model_dump_json(indent=self.config.indent), encoding="utf-8")
        logger.debug("Stored page %s (%s) at %s", page.key, locale, path)
        return True
