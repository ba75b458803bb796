import asyncio

from boardeasy.cities import AutocompleteField, CityResolver, CitySuggestion, DebounceTimer
from boardeasy.config import Settings

from conftest import FakeRouteCatalog

ORIGIN = AutocompleteField.ORIGIN
DESTINATION = AutocompleteField.DESTINATION


async def test_single_character_query_is_ignored(catalog):
    resolver = CityResolver(catalog)

    assert await resolver.resolve_cities("M", ORIGIN) == []

    view = resolver.view(ORIGIN)
    assert view.suggestions == []
    assert view.is_open is False
    assert catalog.calls == 0


async def test_matches_are_unique_and_case_insensitive(catalog):
    resolver = CityResolver(catalog)

    suggestions = await resolver.resolve_cities("pU", ORIGIN)

    assert [s.name for s in suggestions] == ["Pune", "Jaipur", "Nagpur"]
    assert resolver.view(ORIGIN).is_open is True


async def test_suggestions_are_capped(routes):
    many = FakeRouteCatalog(routes)
    resolver = CityResolver(many, Settings(CITY_SUGGESTION_LIMIT=2, CITY_DEBOUNCE_SECONDS=0.01))

    suggestions = await resolver.resolve_cities("pu", ORIGIN)

    assert [s.name for s in suggestions] == ["Pune", "Jaipur"]


async def test_calls_within_debounce_window_collapse(catalog):
    resolver = CityResolver(catalog)

    first = asyncio.create_task(resolver.resolve_cities("Mu", ORIGIN))
    await asyncio.sleep(0.1)
    second = asyncio.create_task(resolver.resolve_cities("Mum", ORIGIN))

    assert await first == []
    assert [s.name for s in await second] == ["Mumbai"]
    assert catalog.calls == 1


async def test_calls_after_debounce_window_look_up_again(catalog):
    resolver = CityResolver(catalog)

    first = asyncio.create_task(resolver.resolve_cities("Pun", ORIGIN))
    await asyncio.sleep(0.4)
    second = asyncio.create_task(resolver.resolve_cities("Pune", ORIGIN))

    assert [s.name for s in await first] == ["Pune"]
    assert [s.name for s in await second] == ["Pune"]
    assert catalog.calls == 2


async def test_fields_debounce_independently(catalog):
    resolver = CityResolver(catalog)

    origin = asyncio.create_task(resolver.resolve_cities("Mum", ORIGIN))
    await asyncio.sleep(0.1)
    destination = asyncio.create_task(resolver.resolve_cities("Goa", DESTINATION))

    assert [s.name for s in await origin] == ["Mumbai"]
    assert [s.name for s in await destination] == ["Goa"]
    assert catalog.calls == 2


async def test_late_result_of_older_query_is_discarded(routes):
    slow_then_fast = FakeRouteCatalog(routes, delays=[0.2, 0])
    resolver = CityResolver(slow_then_fast, Settings(CITY_DEBOUNCE_SECONDS=0.01))

    older = asyncio.create_task(resolver.resolve_cities("Mu", ORIGIN))
    await asyncio.sleep(0.05)  # older lookup is now in flight
    newer = await resolver.resolve_cities("Goa", ORIGIN)

    assert [s.name for s in newer] == ["Goa"]
    assert await older == []
    assert [s.name for s in resolver.view(ORIGIN).suggestions] == ["Goa"]
    assert slow_then_fast.calls == 2


async def test_short_query_cancels_pending_lookup(catalog):
    resolver = CityResolver(catalog)

    pending = asyncio.create_task(resolver.resolve_cities("Mum", ORIGIN))
    await asyncio.sleep(0.05)
    assert await resolver.resolve_cities("M", ORIGIN) == []

    assert await pending == []
    await asyncio.sleep(0.35)
    assert catalog.calls == 0


async def test_catalog_failure_degrades_to_empty(routes):
    broken = FakeRouteCatalog(routes, fail=True)
    resolver = CityResolver(broken, Settings(CITY_DEBOUNCE_SECONDS=0.01))

    assert await resolver.resolve_cities("Mum", ORIGIN) == []
    assert resolver.view(ORIGIN).is_open is False
    assert resolver.view(ORIGIN).is_loading is False


async def test_select_and_focus(catalog):
    resolver = CityResolver(catalog, Settings(CITY_DEBOUNCE_SECONDS=0.01))
    await resolver.resolve_cities("Mum", ORIGIN)

    resolver.close(ORIGIN)
    assert resolver.view(ORIGIN).is_open is False
    assert resolver.focus(ORIGIN) is True

    name = resolver.select(ORIGIN, CitySuggestion(id=0, name="Mumbai"))

    view = resolver.view(ORIGIN)
    assert name == "Mumbai"
    assert view.query == "Mumbai"
    assert view.suggestions == []
    assert view.is_open is False


async def test_debounce_timer_cancel_and_fire():
    timer = DebounceTimer(10)

    first = timer.schedule()
    second = timer.schedule()
    assert await first is False
    assert timer.pending

    timer.fire()
    assert await second is True
    assert not timer.pending

    third = timer.schedule()
    timer.cancel()
    assert await third is False
