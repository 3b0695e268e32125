"""Descriptors consumed by the admin panel when rendering a template."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from .template import PageTemplate


@dataclass(slots=True)
class Field:
    """An editable attribute of a page template."""

    attribute: str
    label: Optional[str] = None
    required: bool = False

    @property
    def display_label(self) -> str:
        if self.label:
            return self.label
        return self.attribute.replace("_", " ").capitalize()

    def resolve(self, page: "PageTemplate") -> Any:
        return page.get(self.attribute)


@dataclass(slots=True)
class Card:
    """A dashboard widget shown beside a template's form."""

    component: str
    options: dict[str, Any] = field(default_factory=dict)
