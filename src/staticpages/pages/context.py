"""Explicit configuration handed to page templates."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from staticpages.config import PagesConfig, ensure_config
from staticpages.sources.registry import SourceRegistry, default_registry

LocaleProvider = Callable[[], str]


@dataclass(slots=True)
class PageContext:
    """Configuration, source registry and current-locale provider shared by templates."""

    config: PagesConfig = field(default_factory=PagesConfig)
    registry: SourceRegistry = field(default_factory=default_registry)
    locale_provider: Optional[LocaleProvider] = None

    def current_locale(self) -> str:
        if self.locale_provider is not None:
            return self.locale_provider()
        return self.config.default_locale

    @classmethod
    def from_config(cls, config_path: Optional[Path] = None, **overrides) -> "PageContext":
        """Build a context from discovered configuration files or environment."""

        return cls(config=ensure_config(config_path=config_path, **overrides))
