"""Interfaces of the collaborators a binding drives."""

from typing import Any, Callable, Iterator, Optional, Protocol


class Record(Protocol):
    """A single remote entity the binding can resolve by id."""

    def get(self, attribute: str) -> Any: ...

    def set(self, attribute: str, value: Any, silent: bool = False) -> None: ...

    async def fetch(self) -> None:
        """Load the entity; raises on failure."""


class SearchableCollection(Protocol):
    """A paged, filterable, remote-backed list of records."""

    def set_filter(self, key: str, value: Any) -> None: ...

    def set_page_size(self, size: int) -> None: ...

    async def fetch(self) -> None:
        """Load the current page; raises on failure."""

    def __iter__(self) -> Iterator[Record]: ...


class InputElement(Protocol):
    """The text field a binding is attached to."""

    value: str

    def add_class(self, name: str) -> None: ...

    def remove_class(self, name: str) -> None: ...

    def has_class(self, name: str) -> bool: ...

    def on(self, name: str, handler: Callable) -> None: ...

    def gate(self, name: str, fn: Callable) -> None: ...

    def off(self, name: str, callback: Optional[Callable] = None) -> None: ...

    def trigger(self, name: str, detail: Optional[dict] = None) -> Any: ...


class AutocompleteWidget(Protocol):
    """An incremental-search primitive configured on an input."""

    @property
    def active(self) -> bool: ...

    def destroy(self) -> None: ...


AutocompleteFactory = Callable[..., AutocompleteWidget]
