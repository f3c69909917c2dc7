"""Headless incremental-search primitive with a settle delay."""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Sequence

import structlog

from recordpicker.components.text_input import Event, TextInput

logger = structlog.get_logger(__name__)

NAMESPACE = "autocomplete"

Respond = Callable[[Sequence[Any]], None]
Source = Callable[["SearchRequest", Respond], Awaitable[None]]
ItemCallback = Callable[[Event, Optional[Any]], None]


@dataclass(frozen=True)
class SearchRequest:
    """What the user typed when the settle delay elapsed."""

    term: str


class Autocomplete:
    """
    Offer remote suggestions for a text input.

    Typing starts a settle timer; when it elapses and the term has at least
    ``min_length`` characters, ``source`` is called with the request and a
    ``respond`` callback. Items passed to ``respond`` become the menu.

    Callbacks receive ``(event, item)`` where items expose ``label`` and
    ``value``:

    - ``focus``: an item is highlighted in the menu
    - ``select``: an item is chosen from the menu
    - ``change``: the input lost focus; fires on every blur with the item
      chosen since the last keystroke, or None
    """

    def __init__(
        self,
        element: TextInput,
        *,
        source: Source,
        min_length: int = 1,
        delay: float = 0.3,
        select: Optional[ItemCallback] = None,
        focus: Optional[ItemCallback] = None,
        change: Optional[ItemCallback] = None,
    ) -> None:
        self.element = element
        self.source = source
        self.min_length = min_length
        self.delay = delay
        self.on_select = select
        self.on_focus = focus
        self.on_change = change

        self.menu: list[Any] = []
        self.term: Optional[str] = None
        self.selected_item: Optional[Any] = None

        self._active = True
        self._timer: Optional[asyncio.Task] = None
        self._searches: set[asyncio.Task] = set()

        element.on(f"input.{NAMESPACE}", self._on_input)
        element.on(f"blur.{NAMESPACE}", self._on_blur)

    @property
    def active(self) -> bool:
        return self._active

    @property
    def is_open(self) -> bool:
        return bool(self.menu)

    # -------------------------------------------------------------------------
    # Searching
    # -------------------------------------------------------------------------

    def _on_input(self, event: Event) -> None:
        self.selected_item = None
        self._cancel_timer()

        term = self.element.value
        if len(term) < self.min_length:
            self.close()
            return

        self._timer = asyncio.get_running_loop().create_task(self._settle(term))

    async def _settle(self, term: str) -> None:
        await asyncio.sleep(self.delay)
        self._timer = None
        self.search(term)

    def search(self, term: Optional[str] = None) -> asyncio.Task:
        """Run the source immediately for ``term`` (default: current text)."""
        term = self.element.value if term is None else term
        self.term = term

        logger.debug("Autocomplete search", term=term)
        task = asyncio.get_running_loop().create_task(
            self.source(SearchRequest(term), self._respond)
        )
        self._searches.add(task)
        task.add_done_callback(self._searches.discard)
        return task

    def _respond(self, items: Sequence[Any]) -> None:
        # Answers for a blurred input are dropped
        if not self._active or not self.element.has_focus:
            return

        self.menu = list(items)
        if self.menu:
            self.element.trigger("autocompleteopen", {"items": list(self.menu)})
        else:
            self.close()

    def _cancel_timer(self) -> None:
        if self._timer:
            self._timer.cancel()
            self._timer = None

    async def wait_idle(self) -> None:
        """Wait for the settle timer and every in-flight search to finish."""
        while self._timer is not None or self._searches:
            pending = [t for t in (self._timer, *self._searches) if t is not None]
            await asyncio.gather(*pending, return_exceptions=True)

    # -------------------------------------------------------------------------
    # Menu interaction
    # -------------------------------------------------------------------------

    def highlight(self, index: int) -> None:
        """Move the menu cursor onto ``menu[index]``."""
        item = self.menu[index]
        event = Event("autocompletefocus")
        if self.on_focus:
            self.on_focus(event, item)
        if not event.default_prevented:
            self.element.value = item.value

    def choose(self, index: int) -> None:
        """Pick ``menu[index]`` and close the menu."""
        item = self.menu[index]
        self.selected_item = item
        event = Event("autocompleteselect")
        if self.on_select:
            self.on_select(event, item)
        if not event.default_prevented:
            self.element.value = item.value
        self.close()

    def close(self) -> None:
        if self.menu:
            self.menu = []
            self.element.trigger("autocompleteclose")

    def _on_blur(self, event: Event) -> None:
        self._cancel_timer()
        self.close()

        change = Event("autocompletechange")
        if self.on_change:
            self.on_change(change, self.selected_item)
        self.selected_item = None

    # -------------------------------------------------------------------------
    # Teardown
    # -------------------------------------------------------------------------

    def destroy(self) -> None:
        """Detach from the input; in-flight searches finish but are ignored."""
        if not self._active:
            return
        self._active = False
        self._cancel_timer()
        self.close()
        self.element.off(f".{NAMESPACE}")
