"""Change gate: only tagged change events reach external listeners."""

from typing import Any

CHANGE_EVENT = "change"
ORIGIN_KEY = "triggered_by"
ORIGIN = "recordpicker"


def tagged(**detail: Any) -> dict[str, Any]:
    """Event detail proving the binding raised the change itself."""
    return {ORIGIN_KEY: ORIGIN, **detail}


def is_tagged(event: Any) -> bool:
    detail = getattr(event, "detail", None) or {}
    return detail.get(ORIGIN_KEY) == ORIGIN


def change_gate(event: Any) -> bool:
    """
    Let a change event through only when the binding raised it.

    The input's native change notification shares the event name with the
    binding's own; untagged events are cancelled before any listener runs.
    """
    return is_tagged(event)
