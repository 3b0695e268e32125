"""In-memory, locale-scoped storage for page titles and attributes."""

from __future__ import annotations

from typing import Any, Mapping, Optional


class LocalizedAttributeStore:
    """Titles and attribute maps of one page, keyed by locale.

    A locale counts as loaded only once :meth:`replace` has ingested a
    record for it; writing single attributes never flags a locale as loaded.
    """

    def __init__(self) -> None:
        self._titles: dict[str, Optional[str]] = {}
        self._attributes: dict[str, dict[str, Any]] = {}
        self._loaded: set[str] = set()

    def is_loaded(self, locale: str) -> bool:
        return locale in self._loaded

    def replace(
        self,
        locale: str,
        title: Optional[str],
        attributes: Optional[Mapping[str, Any]],
    ) -> None:
        """Overwrite everything held for ``locale`` and flag it as loaded."""

        self._titles[locale] = title
        self._attributes[locale] = dict(attributes or {})
        self._loaded.add(locale)

    def get_title(self, locale: str) -> Optional[str]:
        return self._titles.get(locale)

    def set_title(self, locale: str, title: Optional[str]) -> None:
        self._titles[locale] = title

    def get(self, locale: str, attribute: str) -> Any:
        return self._attributes.get(locale, {}).get(attribute)

    def set(self, locale: str, attribute: str, value: Any) -> None:
        self._attributes.setdefault(locale, {})[attribute] = value

    def delete(self, locale: str, attribute: str) -> None:
        self._attributes.get(locale, {}).pop(attribute, None)

    def attributes(self, locale: str) -> dict[str, Any]:
        """Return a copy of the attribute map held for ``locale``."""

        return dict(self._attributes.get(locale, {}))
