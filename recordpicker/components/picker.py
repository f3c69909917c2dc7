"""Textual record picker widget."""

from typing import Any, Mapping, Optional

from textual import events
from textual.binding import Binding as KeyBinding
from textual.containers import Vertical
from textual.message import Message
from textual.reactive import reactive
from textual.widgets import Input, OptionList
from textual.widgets.option_list import Option

from recordpicker.components.autocomplete import Autocomplete
from recordpicker.components.text_input import Event, TextInput
from recordpicker.config import Settings, get_settings
from recordpicker.core.binding import Binding, BoundValue, create_binding


class BridgedInput(TextInput):
    """Headless input whose value and classes are mirrored onto a Textual Input."""

    def __init__(self, widget: Input, picker: "RecordPicker") -> None:
        super().__init__(value=widget.value, name=widget.id)
        self.widget = widget
        self.picker = picker

    @property
    def value(self) -> str:
        return self._value

    @value.setter
    def value(self, value: Optional[str]) -> None:
        self._value = "" if value is None else str(value)
        if self.widget.value != self._value:
            self.widget.value = self._value

    def add_class(self, name: str) -> None:
        super().add_class(name)
        self.widget.add_class(name)
        if name == self.picker.settings.busy_class:
            self.picker.searching = True

    def remove_class(self, name: str) -> None:
        super().remove_class(name)
        self.widget.remove_class(name)
        if name == self.picker.settings.busy_class:
            self.picker.searching = False


class CandidateList(OptionList, can_focus=False):
    """Result list; keyboard navigation stays in the input."""


class RecordPicker(Vertical):
    """Text input bound to a remote collection through a record picker binding."""

    DEFAULT_CSS = """
    RecordPicker {
        height: auto;
    }
    RecordPicker > CandidateList {
        display: none;
        max-height: 12;
    }
    RecordPicker > CandidateList.-open {
        display: block;
    }
    RecordPicker > Input.loading-small {
        border: tall $warning;
    }
    """

    BINDINGS = [
        KeyBinding("down", "cursor_down", "Next", show=False),
        KeyBinding("up", "cursor_up", "Previous", show=False),
        KeyBinding("escape", "close", "Close", show=False),
    ]

    searching: reactive[bool] = reactive(False)

    class Changed(Message):
        """Emitted once per confirmed selection or cleared selection."""

        def __init__(self, picker: "RecordPicker", value: BoundValue) -> None:
            self.picker = picker
            self.value = value
            super().__init__()

    def __init__(
        self,
        options: Mapping[str, Any],
        *,
        settings: Optional[Settings] = None,
        placeholder: str = "Type to search...",
        id: str | None = None,
    ) -> None:
        super().__init__(id=id)
        self.options = options
        self.settings = settings or get_settings()
        self.placeholder = placeholder
        self.element: Optional[BridgedInput] = None
        self.binding: Optional[Binding] = None

    def compose(self):
        yield Input(placeholder=self.placeholder, id="picker-input")
        yield CandidateList(id="picker-options")

    def on_mount(self) -> None:
        """Attach the binding to the headless mirror of the input."""
        self.element = BridgedInput(self.query_one("#picker-input", Input), self)
        self.binding = create_binding(self.element, self.options, settings=self.settings)
        self.element.on("change", self._on_bound_change)
        self.element.on("autocompleteopen", self._on_open)
        self.element.on("autocompleteclose", self._on_close)

    def on_unmount(self) -> None:
        if self.binding:
            self.binding.destroy()

    @property
    def autocomplete(self) -> Optional[Autocomplete]:
        controller = self.binding.controller if self.binding else None
        widget = controller.widget if controller else None
        return widget if isinstance(widget, Autocomplete) else None

    # -------------------------------------------------------------------------
    # Headless -> Textual
    # -------------------------------------------------------------------------

    def _on_open(self, event: Event) -> None:
        options = self.query_one(CandidateList)
        options.clear_options()
        options.add_options([Option(item.label) for item in event.detail["items"]])
        options.add_class("-open")

    def _on_close(self, event: Event) -> None:
        options = self.query_one(CandidateList)
        options.clear_options()
        options.remove_class("-open")

    def _on_bound_change(self, event: Event) -> None:
        self.post_message(self.Changed(self, self.binding.get_value()))

    # -------------------------------------------------------------------------
    # Textual -> headless
    # -------------------------------------------------------------------------

    def on_descendant_focus(self, event: events.DescendantFocus) -> None:
        if self.element and event.widget is self.element.widget:
            self.element.focus()

    def on_descendant_blur(self, event: events.DescendantBlur) -> None:
        if self.element and event.widget is self.element.widget:
            self.element.blur()

    def on_input_changed(self, event: Input.Changed) -> None:
        event.stop()
        # Values written by the binding come back as Changed; skip them
        if self.element is None or event.value == self.element.value:
            return
        self.element.type(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        highlighted = self.query_one(CandidateList).highlighted
        if self.autocomplete and self.autocomplete.is_open and highlighted is not None:
            self.autocomplete.choose(highlighted)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        if self.autocomplete and self.autocomplete.is_open:
            self.autocomplete.choose(event.option_index)

    def _move_cursor(self, step: int) -> None:
        autocomplete = self.autocomplete
        if not autocomplete or not autocomplete.is_open:
            return
        options = self.query_one(CandidateList)
        if step > 0:
            options.action_cursor_down()
        else:
            options.action_cursor_up()
        if options.highlighted is not None:
            autocomplete.highlight(options.highlighted)

    def action_cursor_down(self) -> None:
        self._move_cursor(1)

    def action_cursor_up(self) -> None:
        self._move_cursor(-1)

    def action_close(self) -> None:
        if self.autocomplete:
            self.autocomplete.close()
