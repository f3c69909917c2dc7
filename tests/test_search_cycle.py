import asyncio

from conftest import FakeCollection, search_for
from recordpicker.components.autocomplete import Autocomplete, SearchRequest
from recordpicker.components.text_input import TextInput
from recordpicker.config import Settings
from recordpicker.core.binding import create_binding
from recordpicker.core.search import Candidate, SearchCycle
from recordpicker.core.state import BindingState


def make_cycle(collection, label_field="name", settings=None):
    element = TextInput()
    state = BindingState(
        model=None,
        collection=collection,
        search_field="name",
        label_field=label_field,
    )
    return element, state, SearchCycle(element, state, settings or Settings())


async def test_short_terms_never_fetch(binding, element, collection):
    element.focus()
    element.type("a")
    element.type("ab")
    await binding.controller.widget.wait_idle()

    assert collection.fetch_count == 0


async def test_search_sets_filter_and_page_size(binding, collection):
    await search_for(binding, "Acm")

    assert collection.fetch_count == 1
    assert collection.filters["name"] == "Acm"
    assert collection.page_size == 10


async def test_search_maps_records_to_candidates(binding):
    widget = await search_for(binding, "acme")

    assert widget.menu == [
        Candidate(label="Acme", value="42"),
        Candidate(label="Acme Widgets", value="43"),
    ]


async def test_settle_delay_coalesces_keystrokes():
    collection = FakeCollection([{"id": "1", "name": "Initech"}])
    element, state, cycle = make_cycle(collection)

    widget = Autocomplete(element, source=cycle, min_length=3, delay=0.02)
    element.focus()
    for text in ("Ini", "Init", "Inite"):
        element.type(text)
    await widget.wait_idle()

    assert collection.fetch_count == 1
    assert collection.filters["name"] == "Inite"


async def test_empty_page_yields_no_matches_sentinel():
    element, state, cycle = make_cycle(FakeCollection([]))
    received = []

    await cycle(SearchRequest("zzz"), received.extend)

    assert received == [Candidate(label="No matches found!", value=None)]
    assert received[0].is_sentinel


async def test_failed_fetch_yields_error_sentinel_and_clears_busy():
    element, state, cycle = make_cycle(FakeCollection(fail=True))
    received = []

    await cycle(SearchRequest("acme"), received.extend)

    assert received == [Candidate(label="Unable to search for items!", value=None)]
    assert not element.has_class("loading-small")


async def test_busy_marker_set_while_fetching():
    collection = FakeCollection([{"id": "1", "name": "Initech"}], delay=0.02)
    element, state, cycle = make_cycle(collection)
    received = []

    task = asyncio.create_task(cycle(SearchRequest("ini"), received.extend))
    await collection.started.wait()
    assert element.has_class("loading-small")

    await task
    assert not element.has_class("loading-small")
    assert received == [Candidate(label="Initech", value="1")]


async def test_candidates_use_label_field():
    element, state, cycle = make_cycle(FakeCollection([
        {"id": "1", "name": "acme", "title": "Acme Corporation"},
    ]), label_field="title")
    received = []

    await cycle(SearchRequest("acme"), received.extend)

    assert received == [Candidate(label="Acme Corporation", value="1")]


async def test_page_size_and_labels_follow_settings():
    rows = [{"id": str(i), "name": f"item {i}"} for i in range(5)]
    settings = Settings(page_size=2, no_matches_label="Nothing")
    element, state, cycle = make_cycle(FakeCollection(rows), settings=settings)
    received = []

    await cycle(SearchRequest("item"), received.extend)
    assert [c.value for c in received] == ["0", "1"]

    received.clear()
    await cycle(SearchRequest("zzz"), received.extend)
    assert received == [Candidate(label="Nothing")]


async def test_result_after_destroy_is_dropped(element, record, settings, registry):
    collection = FakeCollection([{"id": "1", "name": "Initech"}], delay=0.02)
    binding = create_binding(
        element,
        {"model": record, "collection": collection, "search_param": "name"},
        settings=settings,
        registry=registry,
    )
    element.focus()
    element.type("Ini")
    widget = binding.controller.widget
    await collection.started.wait()

    binding.destroy()
    await widget.wait_idle()

    assert widget.menu == []
    assert not element.has_class("loading-small")


async def test_failure_after_destroy_is_dropped():
    collection = FakeCollection(fail=True, delay=0.01)
    element, state, cycle = make_cycle(collection)
    received = []

    task = asyncio.create_task(cycle(SearchRequest("ini"), received.extend))
    await collection.started.wait()
    state.release()
    await task

    assert received == []


async def test_stale_response_overwrites_newer_menu():
    collection = FakeCollection([{"id": "1", "name": "Initech"}, {"id": "2", "name": "Intel"}])
    element, state, cycle = make_cycle(collection)

    widget = Autocomplete(element, source=cycle, min_length=3, delay=0)
    element.focus()

    slow = asyncio.Event()

    async def slow_source(request, respond):
        await slow.wait()
        respond([Candidate(label="stale", value="0")])

    widget.source = slow_source
    widget.search("old")
    widget.source = cycle
    await widget.search("Intel")
    assert widget.menu == [Candidate(label="Intel", value="2")]

    slow.set()
    await widget.wait_idle()
    assert widget.menu == [Candidate(label="stale", value="0")]
