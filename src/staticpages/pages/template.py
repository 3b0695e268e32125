"""Base class of editable static pages whose content lives in a content source."""

from __future__ import annotations

import abc
import logging
from datetime import datetime
from typing import Any, Callable, ClassVar, Mapping, Optional

from staticpages.exceptions import ContentNotFoundError, UnknownAttributeAccessError
from staticpages.sources.base import ContentSource

from .context import PageContext
from .dates import DatePredicate, TimestampTracker, earliest, if_unset, latest, utcnow
from .store import LocalizedAttributeStore

logger = logging.getLogger(__name__)

TITLE_ATTRIBUTE = "page_title"
CREATED_AT_ATTRIBUTE = "page_created_at"


class PageTemplate(abc.ABC):
    """An editable page identified by ``page_type`` and ``name``.

    Content is fetched from the configured :class:`ContentSource` once per
    locale, kept in memory, read and written against the active locale, and
    pushed back with :meth:`save`. Creation and update timestamps are shared
    by every locale: the earliest ``created_at`` and the latest
    ``updated_at`` ever observed are kept.

    Concrete templates implement :meth:`fields` and :meth:`cards` and may set
    :attr:`source` to read from a backend other than the configured default.
    """

    source: ClassVar[Optional[str]] = None

    def __init__(
        self,
        name: Optional[str] = None,
        page_type: Optional[str] = None,
        locale: Optional[str] = None,
        throw_on_missing: bool = True,
        *,
        context: Optional[PageContext] = None,
    ) -> None:
        self._name = name
        self._page_type = page_type
        self._context = context if context is not None else PageContext.from_config()
        self._store = LocalizedAttributeStore()
        self._dates = TimestampTracker()
        self._source: Optional[ContentSource] = None
        self._locale = ""
        self.set_locale(locale)
        try:
            self.load(throw_on_missing)
        except Exception:
            self.close()
            raise

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.key!r} locale={self._locale!r}>"

    def __getattr__(self, attribute: str) -> Any:
        raise UnknownAttributeAccessError(type(self).__name__, attribute)

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------
    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def page_type(self) -> Optional[str]:
        return self._page_type

    @property
    def key(self) -> str:
        return f"{self._page_type}.{self._name}"

    @property
    def context(self) -> PageContext:
        return self._context

    @property
    def locale(self) -> str:
        return self._locale

    def set_locale(self, locale: Optional[str] = None) -> "PageTemplate":
        """Switch the active locale. Content for it is not loaded."""

        self._locale = locale or self._context.current_locale()
        return self

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def get_source(self) -> ContentSource:
        if self._source is None:
            config = self._context.config
            source_name = self.source or config.default_source
            source = self._context.registry.create(source_name)
            source.set_config(config.source_config(source.get_name()))
            self._source = source
        return self._source

    def close(self) -> None:
        """Release the resolved source. The template resolves a new one if used again."""

        if self._source is not None:
            self._source.close()
            self._source = None

    def __enter__(self) -> "PageTemplate":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def is_loaded(self, locale: Optional[str] = None) -> bool:
        return self._store.is_loaded(locale or self._locale)

    def load(self, throw_on_missing: bool = True) -> "PageTemplate":
        """Load the page's content for the active locale if it is not loaded yet."""

        if not self._name or self._store.is_loaded(self._locale):
            return self

        source = self.get_source()
        data = source.fetch(self._page_type, self._name, self._locale)
        if data:
            logger.debug("Loaded page %s (%s) from %s", self.key, self._locale, source.get_name())
            self.fill(self._locale, data)
            return self

        if throw_on_missing:
            raise ContentNotFoundError(source.get_name(), self._page_type, self._name)

        logger.debug("No content for page %s (%s) in %s", self.key, self._locale, source.get_name())
        return self

    def fill(self, locale: str, data: Optional[Mapping[str, Any]] = None) -> None:
        """Replace the content held for ``locale`` with ``data`` and reconcile timestamps."""

        data = data or {}
        self._store.replace(locale, data.get("title"), data.get("attributes"))
        self.set_date_if("created_at", data.get("created_at"), earliest)
        self.set_date_if("updated_at", data.get("updated_at"), latest)

    def get_new_template(
        self,
        page_type: Optional[str],
        name: Optional[str],
        locale: Optional[str],
        throw_on_missing: bool = True,
    ) -> "PageTemplate":
        """Create a loaded template of the same class sharing this page's context."""

        return type(self)(name, page_type, locale, throw_on_missing, context=self._context)

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------
    def get(self, attribute: str, transform: Optional[Callable[[Any], Any]] = None) -> Any:
        if attribute == TITLE_ATTRIBUTE:
            value = self.get_title()
        elif attribute == CREATED_AT_ATTRIBUTE:
            value = self.get_date("created_at")
        else:
            value = self._store.get(self._locale, attribute)

        if transform is not None:
            return transform(value)
        return value

    def set(self, attribute: str, value: Any) -> None:
        if attribute == TITLE_ATTRIBUTE:
            self._store.set_title(self._locale, value)
        elif attribute == CREATED_AT_ATTRIBUTE:
            self.set_date("created_at", value)
        else:
            self._store.set(self._locale, attribute, value)

    def has(self, attribute: str) -> bool:
        return self.get(attribute) is not None

    def delete(self, attribute: str) -> None:
        self._store.delete(self._locale, attribute)

    def __getitem__(self, attribute: str) -> Any:
        return self.get(attribute)

    def __setitem__(self, attribute: str, value: Any) -> None:
        self.set(attribute, value)

    def __contains__(self, attribute: object) -> bool:
        return isinstance(attribute, str) and self.has(attribute)

    def __delitem__(self, attribute: str) -> None:
        self.delete(attribute)

    def get_localized(self, locale: str) -> dict[str, Any]:
        return self._store.attributes(locale)

    def get_localized_title(self, locale: str) -> Optional[str]:
        return self._store.get_title(locale)

    def get_title(
        self, default: Optional[str] = None, prepend: str = "", append: str = ""
    ) -> Optional[str]:
        """Return the active locale's title wrapped in ``prepend``/``append``.

        Falls back to ``default``; an empty result after trimming yields ``None``.
        """

        title = self._store.get_title(self._locale)
        if title is None:
            title = default if default is not None else ""
        title = f"{prepend}{title}{append}".strip()
        return title or None

    # ------------------------------------------------------------------
    # Timestamps
    # ------------------------------------------------------------------
    def get_date(self, moment: str = "created_at") -> Optional[datetime]:
        return self._dates.get_date(moment)

    def set_date(self, moment: str, value: object = None) -> Optional[datetime]:
        return self._dates.set_date(moment, value)

    def set_date_if(
        self, moment: str, value: object, predicate: DatePredicate
    ) -> Optional[datetime]:
        return self._dates.set_date_if(moment, value, predicate)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def save(self) -> bool:
        """Persist the active locale through the source and return its verdict."""

        self.set_date_if("created_at", utcnow(), if_unset)
        source = self.get_source()
        stored = source.store(self, self._locale)
        logger.debug("Saved page %s (%s) to %s: %s", self.key, self._locale, source.get_name(), stored)
        return stored

    # ------------------------------------------------------------------
    # Admin panel
    # ------------------------------------------------------------------
    @abc.abstractmethod
    def fields(self, request: Any) -> list:
        """Return the field descriptors the admin panel shows for this template."""

    @abc.abstractmethod
    def cards(self, request: Any) -> list:
        """Return the card descriptors available for the request."""
