from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from staticpages.config import PagesConfig
from staticpages.exceptions import (
    ContentNotFoundError,
    InvalidDateError,
    UnknownAttributeAccessError,
    UnknownSourceError,
)
from staticpages.pages.context import PageContext
from staticpages.pages.generic import GenericTemplate
from staticpages.sources.registry import SourceRegistry


def _utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_load_fetches_each_locale_once(source, context) -> None:
    source.put("page", "home", "en", {"title": "Home", "attributes": {"body": "hi"}})

    page = GenericTemplate("home", "page", context=context)
    page.set("body", "edited")
    page.load()
    page.load()

    assert source.fetch_calls == [("page", "home", "en")]
    assert page.get("body") == "edited"


def test_missing_content_raises_by_default(source, context) -> None:
    with pytest.raises(ContentNotFoundError) as excinfo:
        GenericTemplate("about", "page", "en", context=context)

    assert excinfo.value.source == "counting"
    assert excinfo.value.page_type == "page"
    assert excinfo.value.name == "about"
    assert "page.about" in str(excinfo.value)


def test_missing_content_leaves_locale_unloaded(source, context) -> None:
    page = GenericTemplate("about", "page", "en", False, context=context)

    assert not page.is_loaded()
    assert page.get("x") is None
    assert page.get_title() is None

    source.put("page", "about", "en", {"title": "About"})
    page.load()

    assert len(source.fetch_calls) == 2
    assert page.is_loaded()
    assert page.get_title() == "About"


def test_empty_record_counts_as_missing(source, context) -> None:
    source.put("page", "empty", "en", {})

    with pytest.raises(ContentNotFoundError):
        GenericTemplate("empty", "page", context=context)


def test_nameless_template_never_fetches(source, context) -> None:
    page = GenericTemplate(context=context)

    assert source.fetch_calls == []
    assert page.key == "None.None"


def test_locale_defaults_to_provider(source) -> None:
    source.put("page", "home", "fr", {"title": "Accueil"})
    context = PageContext(
        config=PagesConfig(default_source="counting"),
        registry=SourceRegistry({"counting": lambda: source}),
        locale_provider=lambda: "fr",
    )

    page = GenericTemplate("home", "page", context=context)

    assert page.locale == "fr"
    assert page.get_title() == "Accueil"
    assert page.set_locale().locale == "fr"


def test_locale_defaults_to_configured_locale(source, context) -> None:
    source.put("page", "home", "en", {"title": "Home"})

    assert GenericTemplate("home", "page", context=context).locale == "en"


def test_locales_are_isolated(source, context) -> None:
    source.put("page", "home", "en", {"title": "Home"})
    page = GenericTemplate("home", "page", "en", context=context)

    page.set("x", "english")
    page.set_locale("fr")

    assert page.get("x") is None
    assert source.fetch_calls == [("page", "home", "en")]

    page.set("x", "french")
    page.set_locale("en")
    assert page.get("x") == "english"


def test_switching_locale_then_loading(source, context) -> None:
    source.put("page", "home", "en", {"title": "Home"})
    source.put("page", "home", "fr", {"title": "Accueil"})
    page = GenericTemplate("home", "page", "en", context=context)

    page.set_locale("fr").load()

    assert page.get_title() == "Accueil"
    assert page.get_localized_title("en") == "Home"


def test_reserved_attributes_route_to_title_and_timestamp(source, context) -> None:
    source.put("page", "home", "en", {"title": "Home", "attributes": {"body": "hi"}})
    page = GenericTemplate("home", "page", context=context)

    page.set("page_title", "Welcome")
    page.set("page_created_at", "2021-05-01")

    assert page.get_title() == "Welcome"
    assert page.get("page_title") == "Welcome"
    assert page.get_date("created_at") == _utc(2021, 5, 1)
    assert page.get("page_created_at") == _utc(2021, 5, 1)
    assert page.get_localized("en") == {"body": "hi"}


def test_mapping_access(source, context) -> None:
    source.put("page", "home", "en", {"title": "Home", "attributes": {"body": "hi", "empty": None}})
    page = GenericTemplate("home", "page", context=context)

    page["tagline"] = "hello"

    assert page["tagline"] == "hello"
    assert "body" in page
    assert "empty" not in page
    assert "page_title" in page

    del page["body"]
    del page["missing"]
    del page["page_title"]

    assert "body" not in page
    assert page.get_title() == "Home"


def test_get_applies_transform(source, context) -> None:
    source.put("page", "home", "en", {"title": "Home", "attributes": {"body": "hi"}})
    page = GenericTemplate("home", "page", context=context)

    assert page.get("body", str.upper) == "HI"
    assert page.get("missing", lambda value: value is None) is True


@pytest.mark.parametrize(
    ("stored", "default", "prepend", "append", "expected"),
    [
        ("Home", None, "", "", "Home"),
        ("Home", "Fallback", "", "", "Home"),
        (None, "Fallback", "", "", "Fallback"),
        (None, None, "", "", None),
        (None, None, "  ", " ", None),
        ("  Home  ", None, "", "", "Home"),
        ("Home", None, "Site | ", "", "Site | Home"),
        (None, None, "Site", " - ", "Site -"),
        ("", "Fallback", "", "", None),
    ],
)
def test_title_fallback_chain(source, context, stored, default, prepend, append, expected) -> None:
    source.put("page", "home", "en", {"title": stored, "attributes": {"body": "x"}})
    page = GenericTemplate("home", "page", context=context)

    assert page.get_title(default, prepend, append) == expected


def test_timestamps_reconcile_across_locales(source, context) -> None:
    source.put("page", "home", "en", {"title": "Home", "created_at": "2020-01-05", "updated_at": "2020-02-01"})
    source.put("page", "home", "fr", {"title": "Accueil", "created_at": "2020-01-01", "updated_at": "2020-01-15"})
    source.put("page", "home", "de", {"title": "Start", "created_at": "2020-03-01", "updated_at": "2020-03-02"})
    page = GenericTemplate("home", "page", "en", context=context)

    page.set_locale("fr").load()
    page.set_locale("de").load()

    assert page.get_date("created_at") == _utc(2020, 1, 1)
    assert page.get_date("updated_at") == _utc(2020, 3, 2)


def test_fill_round_trip(context) -> None:
    page = GenericTemplate(context=context)

    page.fill(
        "en",
        {
            "title": "Home",
            "attributes": {"body": "hi"},
            "created_at": "2020-01-01",
            "updated_at": "2020-01-02",
        },
    )

    assert page.is_loaded("en")
    assert page.get_title() == "Home"
    assert page.get("body") == "hi"
    assert page.get_date("created_at") == _utc(2020, 1, 1)
    assert page.get_date("updated_at") == _utc(2020, 1, 2)


def test_fill_replaces_locale_content(context) -> None:
    page = GenericTemplate(context=context)
    page.fill("en", {"title": "Home", "attributes": {"body": "hi", "tagline": "old"}})

    page.fill("en", {"attributes": {"body": "new"}})

    assert page.get_title() is None
    assert page.get_localized("en") == {"body": "new"}


def test_fill_rejects_unparseable_dates(context) -> None:
    page = GenericTemplate(context=context)

    with pytest.raises(InvalidDateError):
        page.fill("en", {"title": "Home", "created_at": "not a date"})


def test_save_stamps_creation_once(source, context) -> None:
    source.put("page", "home", "en", {"title": "Home"})
    page = GenericTemplate("home", "page", context=context)
    assert page.get_date("created_at") is None

    before = datetime.now(timezone.utc)
    assert page.save() is True
    created = page.get_date("created_at")

    assert created is not None
    assert before - timedelta(seconds=1) <= created <= datetime.now(timezone.utc)

    assert page.save() is True
    assert page.get_date("created_at") == created
    assert source.store_calls == ["en", "en"]


def test_save_keeps_existing_creation_date(source, context) -> None:
    source.put("page", "home", "en", {"title": "Home", "created_at": "2019-06-01"})
    page = GenericTemplate("home", "page", context=context)

    page.save()

    assert page.get_date("created_at") == _utc(2019, 6, 1)
    assert source.pages[("page", "home", "en")]["created_at"] == _utc(2019, 6, 1)


def test_save_reports_source_failure(source, context) -> None:
    source.put("page", "home", "en", {"title": "Home", "attributes": {"body": "hi"}})
    page = GenericTemplate("home", "page", context=context)
    page.set("body", "changed")
    source.store_result = False

    assert page.save() is False
    assert page.get("body") == "changed"


def test_save_writes_active_locale(source, context) -> None:
    source.put("page", "home", "en", {"title": "Home"})
    page = GenericTemplate("home", "page", context=context)

    page.set_locale("fr")
    page.set("page_title", "Accueil")
    page.set("body", "bonjour")
    page.save()

    stored = source.pages[("page", "home", "fr")]
    assert stored["title"] == "Accueil"
    assert stored["attributes"] == {"body": "bonjour"}


def test_source_is_resolved_once_with_its_config(source, context) -> None:
    source.put("page", "home", "en", {"title": "Home"})
    page = GenericTemplate("home", "page", context=context)

    assert page.get_source() is page.get_source()
    assert page.get_source().get_name() == "counting"
    assert source.config == {"flag": "on"}


def test_template_can_pin_its_source(context) -> None:
    class MemoryPage(GenericTemplate):
        source = "memory"

    page = MemoryPage("home", "page", throw_on_missing=False, context=context)

    assert page.get_source().get_name() == "memory"


def test_context_manager_closes_the_source(source, context) -> None:
    source.put("page", "home", "en", {"title": "Home"})

    with GenericTemplate("home", "page", context=context) as page:
        assert page.get_title() == "Home"
        assert source.close_calls == 0

    assert source.close_calls == 1


def test_close_releases_source_until_next_use(source, context) -> None:
    source.put("page", "home", "en", {"title": "Home"})
    page = GenericTemplate("home", "page", context=context)

    page.close()
    page.close()
    assert source.close_calls == 1

    page.set("body", "hi")
    assert page.save()
    assert source.config == {"flag": "on"}


def test_failed_load_closes_the_source(source, context) -> None:
    with pytest.raises(ContentNotFoundError):
        GenericTemplate("about", "page", "en", context=context)

    assert source.close_calls == 1


def test_unknown_source_name(source) -> None:
    context = PageContext(
        config=PagesConfig(default_source="nowhere"),
        registry=SourceRegistry({"counting": lambda: source}),
    )

    with pytest.raises(UnknownSourceError):
        GenericTemplate("home", "page", context=context)


def test_get_new_template_builds_same_variant(source, context) -> None:
    source.put("page", "home", "en", {"title": "Home"})
    source.put("page", "contact", "fr", {"title": "Contact"})

    class LandingPage(GenericTemplate):
        pass

    page = LandingPage("home", "page", context=context)
    sibling = page.get_new_template("page", "contact", "fr")

    assert type(sibling) is LandingPage
    assert sibling.context is context
    assert sibling.key == "page.contact"
    assert sibling.locale == "fr"
    assert sibling.get_title() == "Contact"


def test_unknown_accessor_raises(source, context) -> None:
    source.put("page", "home", "en", {"title": "Home"})
    page = GenericTemplate("home", "page", context=context)

    with pytest.raises(UnknownAttributeAccessError) as excinfo:
        page.subtitle()

    assert str(excinfo.value) == "Method GenericTemplate.subtitle does not exist."
    assert not hasattr(page, "subtitle")


def test_instances_do_not_share_stores(source, context) -> None:
    source.put("page", "home", "en", {"title": "Home", "attributes": {"body": "hi"}})
    first = GenericTemplate("home", "page", context=context)
    second = GenericTemplate("home", "page", context=context)

    first.set("body", "changed")

    assert second.get("body") == "hi"
