"""Per-input binding state and the registry that owns it."""

import weakref
from dataclasses import dataclass, field
from typing import Any, Optional

from recordpicker.core.protocols import InputElement, Record, SearchableCollection


@dataclass
class BindingState:
    """Everything a binding remembers about one attached input."""

    model: Record
    collection: SearchableCollection
    search_field: str
    label_field: str = "name"
    selected_id: Optional[Any] = None
    previous_value: Optional[str] = None
    attached: bool = True
    controller: Any = None
    # In-flight set_value fetches, held until they finish
    resolving: set = field(default_factory=set)

    def select(self, record_id: Any) -> None:
        self.selected_id = record_id

    def clear_selection(self) -> None:
        self.selected_id = None

    def snapshot(self, value: str) -> None:
        self.previous_value = value

    def clear_snapshot(self) -> None:
        self.previous_value = None

    def release(self) -> None:
        """Drop cached ids and mark the state detached."""
        self.attached = False
        self.selected_id = None
        self.previous_value = None
        self.controller = None


class BindingRegistry:
    """Maps each input to at most one BindingState."""

    def __init__(self) -> None:
        self._states: "weakref.WeakKeyDictionary[InputElement, BindingState]" = (
            weakref.WeakKeyDictionary()
        )

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, element: InputElement) -> bool:
        return element in self._states

    def get(self, element: InputElement) -> Optional[BindingState]:
        return self._states.get(element)

    def add(self, element: InputElement, state: BindingState) -> BindingState:
        self._states[element] = state
        return state

    def discard(self, element: InputElement) -> Optional[BindingState]:
        return self._states.pop(element, None)


# Shared by every Binding unless one is given explicitly
registry = BindingRegistry()
