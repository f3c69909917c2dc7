"""Input components.

The Textual widgets live in ``recordpicker.components.picker`` and
``recordpicker.components.status_bar``; import them from there.
"""

from .text_input import Event, TextInput
from .autocomplete import Autocomplete, SearchRequest

__all__ = [
    "Event",
    "TextInput",
    "Autocomplete",
    "SearchRequest",
]
