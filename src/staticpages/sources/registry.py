"""Name-based lookup of content source factories."""

from __future__ import annotations

import logging
from typing import Callable, Iterator, Mapping, Optional

from staticpages.exceptions import UnknownSourceError

from .base import ContentSource

logger = logging.getLogger(__name__)

SourceFactory = Callable[[], ContentSource]


class SourceRegistry:
    """Map source names to zero-argument factories."""

    def __init__(self, factories: Optional[Mapping[str, SourceFactory]] = None) -> None:
        self._factories: dict[str, SourceFactory] = dict(factories or {})

    def register(self, name: str, factory: SourceFactory) -> None:
        self._factories[name] = factory

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._factories))

    def create(self, name: str) -> ContentSource:
        """Instantiate the source registered as ``name``."""

        try:
            factory = self._factories[name]
        except KeyError:
            raise UnknownSourceError(name) from None
        source = factory()
        logger.debug("Created content source %r from factory %r", source.get_name(), name)
        return source


def default_registry() -> SourceRegistry:
    """Return a registry holding the built-in sources."""

    from .filesystem import FilesystemSource
    from .http import HttpSource
    from .memory import MemorySource

    return SourceRegistry(
        {
            FilesystemSource.name: FilesystemSource,
            HttpSource.name: HttpSource,
            MemorySource.name: MemorySource,
        }
    )
