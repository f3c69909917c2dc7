"""Binding core: state, search cycle, selection and the change gate."""

from recordpicker.core.binding import (
    Binding,
    BindingOptions,
    BoundValue,
    create_binding,
)
from recordpicker.core.gate import change_gate, is_tagged, tagged
from recordpicker.core.search import Candidate, SearchCycle
from recordpicker.core.selection import SelectionController
from recordpicker.core.state import BindingRegistry, BindingState

__all__ = [
    "Binding",
    "BindingOptions",
    "BoundValue",
    "create_binding",
    "change_gate",
    "is_tagged",
    "tagged",
    "Candidate",
    "SearchCycle",
    "SelectionController",
    "BindingRegistry",
    "BindingState",
]
