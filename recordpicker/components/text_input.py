"""Headless text input element."""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

Handler = Callable[["Event"], None]
Gate = Callable[["Event"], bool]


@dataclass
class Event:
    """A notification delivered to the handlers of an input."""

    type: str
    detail: dict[str, Any] = field(default_factory=dict)
    default_prevented: bool = False
    propagation_stopped: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True

    def stop_propagation(self) -> None:
        self.propagation_stopped = True


@dataclass
class _Subscription:
    event: str
    namespace: Optional[str]
    callback: Callable


def _split(name: str) -> tuple[str, Optional[str]]:
    """Split ``"change.ns"`` into ``("change", "ns")``."""
    event, _, namespace = name.partition(".")
    return event, namespace or None


class TextInput:
    """
    Text field with browser-like focus, input, blur and change events.

    Handlers subscribe with ``on("event.namespace", fn)`` and run in
    subscription order. Gates subscribe with ``gate(...)`` and run before
    every handler of the event; a gate returning False cancels the event.
    """

    def __init__(self, value: str = "", name: Optional[str] = None) -> None:
        self.name = name
        self._value = value
        self._value_at_focus: Optional[str] = None
        self._classes: set[str] = set()
        self._handlers: list[_Subscription] = []
        self._gates: list[_Subscription] = []

    def __repr__(self) -> str:
        return f"TextInput(name={self.name!r}, value={self._value!r})"

    @property
    def value(self) -> str:
        return self._value

    @value.setter
    def value(self, value: Optional[str]) -> None:
        self._value = "" if value is None else str(value)

    @property
    def has_focus(self) -> bool:
        return self._value_at_focus is not None

    # -------------------------------------------------------------------------
    # Classes
    # -------------------------------------------------------------------------

    def add_class(self, name: str) -> None:
        self._classes.add(name)

    def remove_class(self, name: str) -> None:
        self._classes.discard(name)

    def has_class(self, name: str) -> bool:
        return name in self._classes

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def on(self, name: str, handler: Handler) -> None:
        """Subscribe a handler to ``event`` or ``event.namespace``."""
        event, namespace = _split(name)
        self._handlers.append(_Subscription(event, namespace, handler))

    def gate(self, name: str, fn: Gate) -> None:
        """Subscribe a gate that decides whether ``event`` reaches handlers."""
        event, namespace = _split(name)
        self._gates.append(_Subscription(event, namespace, fn))

    def off(self, name: str, callback: Optional[Callable] = None) -> None:
        """
        Remove handlers and gates.

        ``"change"`` removes every subscription to change, ``".ns"`` removes
        every subscription in the namespace, ``"change.ns"`` removes the
        namespace's change subscriptions.
        """
        event, namespace = _split(name)

        def matches(sub: _Subscription) -> bool:
            if event and sub.event != event:
                return False
            if namespace and sub.namespace != namespace:
                return False
            if callback is not None and sub.callback is not callback:
                return False
            return True

        self._handlers = [s for s in self._handlers if not matches(s)]
        self._gates = [s for s in self._gates if not matches(s)]

    def listener_count(self, event: str) -> int:
        return sum(1 for s in self._handlers if s.event == event)

    def trigger(self, name: str, detail: Optional[dict[str, Any]] = None) -> Event:
        """Deliver an event to gates, then to handlers in order."""
        event = Event(type=name, detail=dict(detail or {}))

        for sub in [s for s in self._gates if s.event == name]:
            if not sub.callback(event):
                event.prevent_default()
                event.stop_propagation()
                return event

        for sub in [s for s in self._handlers if s.event == name]:
            sub.callback(event)
            if event.propagation_stopped:
                break

        return event

    # -------------------------------------------------------------------------
    # User interaction
    # -------------------------------------------------------------------------

    def focus(self) -> None:
        if self.has_focus:
            return
        self._value_at_focus = self._value
        self.trigger("focus")

    def type(self, text: str) -> None:
        """Replace the text as if the user typed it."""
        self._value = text
        self.trigger("input")

    def blur(self) -> None:
        """Leave the field; fires ``change`` when the text differs from focus time."""
        if not self.has_focus:
            return
        before = self._value_at_focus
        self.trigger("blur")
        self._value_at_focus = None
        if self._value != before:
            self.trigger("change")
