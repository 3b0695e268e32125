"""Configuration helpers for static page templates."""

from __future__ import annotations

import dataclasses
import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError


class PagesConfig(BaseModel):
    """Process-wide defaults plus the settings of every content source."""

    default_source: str = Field("filesystem", description="Source used when a template names none")
    default_locale: str = Field("en", description="Locale used when none is supplied")
    sources: dict[str, dict[str, Any]] = Field(
        default_factory=dict, description="Backend-specific settings keyed by source name"
    )

    def source_config(self, name: str) -> dict[str, Any]:
        return dict(self.sources.get(name) or {})


ENV_PREFIX = "STATICPAGES"
DEFAULT_CONFIG_PATHS = (
    Path.cwd() / "staticpages.toml",
    Path.home() / ".config" / "staticpages" / "config.toml",
)


@dataclasses.dataclass
class ConfigSource:
    """Result of attempting to resolve configuration data."""

    config: Optional[PagesConfig]
    path: Optional[Path]
    error: Optional[Exception]


def _load_from_env() -> dict[str, object]:
    """Return configuration values extracted from ``STATICPAGES_*`` environment variables."""

    def _get(name: str) -> Optional[str]:
        return os.getenv(f"{ENV_PREFIX}_{name}")

    env_data: dict[str, object] = {}
    for key in ("DEFAULT_SOURCE", "DEFAULT_LOCALE"):
        value = _get(key)
        if value:
            env_data[key.lower()] = value

    path = _get("PATH")
    if path:
        env_data["sources"] = {"filesystem": {"path": path}}

    return env_data


def _load_toml(path: Path) -> Optional[dict]:
    if not path.exists():
        return None

    with path.open("rb") as handle:
        return tomllib.load(handle)


def resolve_config(explicit_path: Optional[Path] = None) -> ConfigSource:
    """Discover configuration using the first available source.

    The priority order is:
    1. Explicit path provided by the caller.
    2. Default configuration files in the working directory or the user's config directory.
    3. Environment variables with the `STATICPAGES_` prefix.

    When none of them yields data the built-in defaults are returned.
    """

    errors: list[Exception] = []
    sources: list[tuple[Optional[Path], Optional[dict]]] = []

    if explicit_path:
        try:
            data = _load_toml(explicit_path)
            if data is not None:
                sources.append((explicit_path, data))
            else:
                errors.append(FileNotFoundError(f"Configuration file {explicit_path} does not exist"))
        except (OSError, tomllib.TOMLDecodeError) as exc:
            errors.append(exc)

    if not sources:
        for path in DEFAULT_CONFIG_PATHS:
            try:
                data = _load_toml(path)
            except (OSError, tomllib.TOMLDecodeError) as exc:  # pragma: no cover
                errors.append(exc)
                continue
            if data is not None:
                sources.append((path, data))
                break

    if not sources:
        env_data = _load_from_env()
        if env_data:
            sources.append((None, env_data))

    for path, data in sources:
        try:
            config = PagesConfig.model_validate(data)
            return ConfigSource(config=config, path=path, error=None)
        except ValidationError as exc:
            errors.append(exc)

    if errors:
        return ConfigSource(config=None, path=None, error=errors[0])
    return ConfigSource(config=PagesConfig(), path=None, error=None)


def ensure_config(
    *,
    default_source: Optional[str] = None,
    default_locale: Optional[str] = None,
    config_path: Optional[Path] = None,
) -> PagesConfig:
    """Resolve configuration and apply explicit overrides on top of it."""

    source = resolve_config(config_path)
    if source.config is None:
        raise RuntimeError(f"Invalid static pages configuration: {source.error}")

    config = source.config.model_copy(deep=True)
    if default_source:
        config.default_source = default_source
    if default_locale:
        config.default_locale = default_locale

    return config
