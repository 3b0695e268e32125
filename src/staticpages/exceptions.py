"""Exceptions raised by static page templates and their content sources."""

from __future__ import annotations

from typing import Optional


class StaticPagesError(Exception):
    """Base class for every error raised by the package."""


class ContentNotFoundError(StaticPagesError):
    """A source holds no content for the requested page."""

    def __init__(self, source: str, page_type: Optional[str], name: Optional[str]) -> None:
        self.source = source
        self.page_type = page_type
        self.name = name
        super().__init__(
            f'Content for page "{page_type}.{name}" not found in source "{source}".'
        )


class InvalidDateError(StaticPagesError, ValueError):
    """A timestamp-like value could not be parsed."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Unable to parse {value!r} as a date.")


class UnknownAttributeAccessError(StaticPagesError, AttributeError):
    def __init__(self, owner: str, method: str) -> None:
        self.owner = owner
        self.method = method
        super().__init__(f"Method {owner}.{method} does not exist.")


class UnknownSourceError(StaticPagesError, LookupError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No content source registered under {name!r}.")
