"""Shared fixtures: in-memory collection and record fakes."""

import asyncio

import pytest

from recordpicker.components.text_input import TextInput
from recordpicker.config import Settings
from recordpicker.core.binding import create_binding
from recordpicker.core.state import BindingRegistry
from recordpicker.errors import FetchError


class FakeRecord:
    """Record resolved from an in-memory store keyed by id."""

    def __init__(self, store=None, fail=False, delays=None):
        self.store = store or {}
        self.fail = fail
        self.delays = delays or {}
        self.attributes = {}
        self.set_calls = []
        self.fetch_count = 0

    def get(self, attribute):
        return self.attributes.get(attribute)

    def set(self, attribute, value, silent=False):
        self.attributes[attribute] = value
        self.set_calls.append((attribute, value, silent))

    async def fetch(self):
        self.fetch_count += 1
        record_id = self.attributes.get("id")
        await asyncio.sleep(self.delays.get(record_id, 0))
        if self.fail or record_id not in self.store:
            raise FetchError(f"record {record_id} not found", status_code=404)
        self.attributes = {"id": record_id, **self.store[record_id]}


class FakeCollection:
    """Collection filtering dict rows by case-insensitive substring."""

    def __init__(self, rows=None, fail=False, delay=0):
        self.rows = rows or []
        self.fail = fail
        self.delay = delay
        self.filters = {}
        self.page_size = None
        self.page = []
        self.fetch_count = 0
        self.reset_count = 0
        self.started = asyncio.Event()

    def __iter__(self):
        return iter(self.page)

    def set_filter(self, key, value):
        self.filters[key] = value

    def set_page_size(self, size):
        self.page_size = size

    def reset_pagination_state(self):
        self.reset_count += 1
        self.filters.clear()
        self.page_size = None

    def _matches(self, row):
        return all(
            str(value).lower() in str(row.get(key, "")).lower()
            for key, value in self.filters.items()
        )

    async def fetch(self):
        self.fetch_count += 1
        self.started.set()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise FetchError("search failed", status_code=500)

        matches = [row for row in self.rows if self._matches(row)]
        if self.page_size is not None:
            matches = matches[: self.page_size]

        self.page = []
        for row in matches:
            record = FakeRecord()
            record.attributes = dict(row)
            self.page.append(record)


ROWS = [
    {"id": "42", "name": "Acme", "title": "Acme Corporation"},
    {"id": "43", "name": "Acme Widgets", "title": "Acme Widgets Ltd"},
    {"id": "7", "name": "Globex", "title": "Globex Inc"},
]


@pytest.fixture
def settings():
    return Settings(delay_ms=0)


@pytest.fixture
def registry():
    return BindingRegistry()


@pytest.fixture
def element():
    return TextInput(name="advertiser")


@pytest.fixture
def collection():
    return FakeCollection(ROWS)


@pytest.fixture
def record():
    return FakeRecord(store={row["id"]: {"name": row["name"], "title": row["title"]} for row in ROWS})


@pytest.fixture
def options(record, collection):
    return {"model": record, "collection": collection, "search_param": "name"}


@pytest.fixture
def binding(element, options, settings, registry):
    return create_binding(element, options, settings=settings, registry=registry)


@pytest.fixture
def changes(element):
    """Change events that reach an external listener."""
    received = []
    element.on("change", received.append)
    return received


async def search_for(binding, text):
    """Focus the input, type ``text`` and wait for the search to settle."""
    element = binding.element
    element.focus()
    element.type(text)
    await binding.controller.widget.wait_idle()
    return binding.controller.widget
