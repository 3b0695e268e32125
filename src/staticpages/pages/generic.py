"""Template variant that exposes whatever attributes a page holds."""

from __future__ import annotations

from typing import Any

from .fields import Card, Field
from .template import TITLE_ATTRIBUTE, PageTemplate


class GenericTemplate(PageTemplate):
    def fields(self, request: Any) -> list[Field]:
        fields = [Field(TITLE_ATTRIBUTE, label="Title", required=True)]
        for attribute in sorted(self.get_localized(self.locale)):
            fields.append(Field(attribute))
        return fields

    def cards(self, request: Any) -> list[Card]:
        return []
