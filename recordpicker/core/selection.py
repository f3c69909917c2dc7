"""Selection controller: reacts to the autocomplete primitive's callbacks."""

from typing import Any, Optional

import structlog

from recordpicker.config import Settings
from recordpicker.core.gate import CHANGE_EVENT, tagged
from recordpicker.core.protocols import AutocompleteFactory, AutocompleteWidget, InputElement
from recordpicker.core.search import Candidate, SearchCycle
from recordpicker.core.state import BindingState

logger = structlog.get_logger(__name__)


class SelectionController:
    """
    Keep the bound id and displayed text in step with the result list.

    The autocomplete primitive is configured the first time the input is
    focused and reused afterwards. Each confirmed interaction raises exactly
    one tagged change event on the input.
    """

    def __init__(
        self,
        element: InputElement,
        state: BindingState,
        settings: Settings,
        factory: AutocompleteFactory,
    ) -> None:
        self.element = element
        self.state = state
        self.settings = settings
        self.factory = factory
        self.widget: Optional[AutocompleteWidget] = None
        self.search = SearchCycle(element, state, settings)
        # Item whose selection already raised a change this interaction
        self._announced: Optional[Candidate] = None

    @property
    def active(self) -> bool:
        return self.widget is not None and self.widget.active

    def on_focus(self, event: Any) -> None:
        self.state.snapshot(self.element.value)

        if self.active:
            return

        self.widget = self.factory(
            self.element,
            source=self.search,
            min_length=self.settings.min_length,
            delay=self.settings.delay,
            select=self.on_select,
            focus=self.on_highlight,
            change=self.on_commit,
        )
        logger.debug("Autocomplete configured", field=self.state.search_field)

    def on_highlight(self, event: Any, item: Optional[Candidate]) -> None:
        """Preview the highlighted label without committing it."""
        event.prevent_default()
        if item is not None:
            self.element.value = item.label

    def on_select(self, event: Any, item: Optional[Candidate]) -> None:
        event.prevent_default()
        self._apply(item)
        # Later edits are measured against the chosen label
        self.state.snapshot(self.element.value)
        self._announced = item
        self._announce()

    def on_commit(self, event: Any, item: Optional[Candidate]) -> None:
        """
        Handle the primitive's blur-time change callback.

        It fires on every blur, changed or not. A plain blur with the text
        unchanged since focus is a no-op; a plain blur after an edit clears
        the selection.
        """
        event.prevent_default()
        event.stop_propagation()

        announced, self._announced = self._announced, None

        if item is not None:
            self._apply(item)
            self.state.clear_snapshot()
            if item is announced:
                return
        elif self.element.value == self.state.previous_value:
            self.state.clear_snapshot()
            return
        else:
            self.state.clear_snapshot()
            self.state.clear_selection()
            self.element.value = ""

        self._announce()

    def _apply(self, item: Optional[Candidate]) -> None:
        if item is not None and not item.is_sentinel:
            self.state.select(item.value)
            self.element.value = item.label
        else:
            self.state.clear_selection()
            self.element.value = ""

    def _announce(self) -> None:
        logger.debug(
            "Binding changed",
            id=self.state.selected_id,
            name=self.element.value,
        )
        self.element.trigger(
            CHANGE_EVENT,
            tagged(id=self.state.selected_id, name=self.element.value),
        )

    def deactivate(self) -> None:
        if self.widget is not None:
            self.widget.destroy()
        self.widget = None
        self._announced = None
