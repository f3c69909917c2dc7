"""Record picker - remote incremental search bound to a text input."""

__version__ = "0.1.0"

from recordpicker.core import (
    Binding,
    BindingOptions,
    BoundValue,
    Candidate,
    create_binding,
)
from recordpicker.errors import ConfigurationError, FetchError, RecordPickerError

__all__ = [
    "__version__",
    "Binding",
    "BindingOptions",
    "BoundValue",
    "Candidate",
    "create_binding",
    "ConfigurationError",
    "FetchError",
    "RecordPickerError",
]
