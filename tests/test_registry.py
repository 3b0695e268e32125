from __future__ import annotations

import pytest

from staticpages.exceptions import UnknownSourceError
from staticpages.sources.memory import MemorySource
from staticpages.sources.registry import SourceRegistry, default_registry


def test_default_registry_holds_builtin_sources() -> None:
    registry = default_registry()

    assert list(registry) == ["filesystem", "http", "memory"]
    assert registry.create("memory").get_name() == "memory"


def test_each_create_builds_a_new_instance() -> None:
    registry = SourceRegistry()
    registry.register("memory", MemorySource)

    assert "memory" in registry
    assert registry.create("memory") is not registry.create("memory")


def test_unknown_name_raises() -> None:
    with pytest.raises(UnknownSourceError) as excinfo:
        SourceRegistry().create("database")

    assert excinfo.value.name == "database"
    assert isinstance(excinfo.value, LookupError)
