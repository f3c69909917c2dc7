"""Public binding API: attach, get/set value, search params, destroy."""

import asyncio
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

import structlog
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from recordpicker.components.autocomplete import Autocomplete
from recordpicker.config import Settings, get_settings
from recordpicker.core.gate import change_gate
from recordpicker.core.protocols import AutocompleteFactory, InputElement
from recordpicker.core.selection import SelectionController
from recordpicker.core.state import BindingRegistry, BindingState, registry as default_registry
from recordpicker.errors import ConfigurationError

logger = structlog.get_logger(__name__)

NAMESPACE = "recordpicker"


class BindingOptions(BaseModel):
    """Options accepted by ``attach``."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True, extra="ignore")

    model: Any
    collection: Any
    search_param: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("search_param", "searchParam"),
    )
    label_field: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("label_field", "labelField"),
    )

    @field_validator("model", "collection", mode="after")
    @classmethod
    def ensure_present(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("Field required")
        return v


@dataclass(frozen=True)
class BoundValue:
    """The id of the selected record ("" when none) and the displayed text."""

    id: Any
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}


def _parse_options(options: Union[BindingOptions, Mapping[str, Any], None]) -> BindingOptions:
    if isinstance(options, BindingOptions):
        return options

    try:
        return BindingOptions.model_validate(dict(options or {}))
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        logger.error("Invalid binding options", fields=fields)
        raise ConfigurationError(
            "Please specify a model, collection and search parameter in the "
            f"options for a record picker (invalid: {', '.join(fields)})."
        ) from e


class Binding:
    """
    One record picker attached to one input.

    State lives in a registry keyed by the input, so every Binding created
    for the same input operates on the same state. Every operation except
    ``attach`` is a no-op while the input is not attached.
    """

    def __init__(
        self,
        element: InputElement,
        *,
        settings: Optional[Settings] = None,
        registry: Optional[BindingRegistry] = None,
        autocomplete_factory: Optional[AutocompleteFactory] = None,
    ) -> None:
        self.element = element
        self.settings = settings or get_settings()
        self.registry = registry if registry is not None else default_registry
        self.autocomplete_factory = autocomplete_factory or Autocomplete

    @property
    def state(self) -> Optional[BindingState]:
        return self.registry.get(self.element)

    @property
    def attached(self) -> bool:
        return self.state is not None

    @property
    def controller(self) -> Optional[SelectionController]:
        state = self.state
        return state.controller if state else None

    def attach(self, options: Union[BindingOptions, Mapping[str, Any], None] = None) -> "Binding":
        """
        Attach to the input.

        Raises ConfigurationError when ``model``, ``collection`` or
        ``search_param`` is missing. Attaching an attached input does nothing.
        """
        opts = _parse_options(options)

        if self.attached:
            return self

        # Forget pagination or search state left over from other views
        reset = getattr(opts.collection, "reset_pagination_state", None)
        if callable(reset):
            reset()

        state = BindingState(
            model=opts.model,
            collection=opts.collection,
            search_field=opts.search_param,
            label_field=opts.label_field or self.settings.default_label_field,
        )
        state.controller = SelectionController(
            self.element, state, self.settings, self.autocomplete_factory
        )
        self.registry.add(self.element, state)

        self.element.on(f"focus.{NAMESPACE}", state.controller.on_focus)
        self.element.gate(f"change.{NAMESPACE}", change_gate)

        logger.debug(
            "Binding attached",
            search_field=state.search_field,
            label_field=state.label_field,
        )
        return self

    def get_value(self) -> BoundValue:
        state = self.state
        selected = state.selected_id if state else None
        return BoundValue(
            id="" if selected is None else selected,
            name=self.element.value,
        )

    def set_value(self, record_id: Any = None) -> Optional[asyncio.Task]:
        """
        Resolve ``record_id`` and display its label.

        Returns the task running the fetch, or None when not attached.
        Overlapping calls are not coalesced; the fetch that resolves last wins.
        """
        if record_id is None:
            logger.error("set_value called without an id")
            raise ConfigurationError(
                "Please specify the id of the record when setting a value on a record picker."
            )

        state = self.state
        if state is None:
            return None

        # Fails before touching the model when no loop is running
        loop = asyncio.get_running_loop()

        state.model.set("id", record_id, silent=True)
        task = loop.create_task(self._resolve(state, record_id))
        state.resolving.add(task)
        task.add_done_callback(state.resolving.discard)
        return task

    async def _resolve(self, state: BindingState, record_id: Any) -> None:
        try:
            await state.model.fetch()
        except Exception as e:
            logger.warning("Unable to resolve record", id=record_id, error=str(e))
            if not state.attached:
                return
            self.element.value = ""
            state.clear_selection()
            return

        if not state.attached:
            return

        self.element.value = state.model.get(state.label_field)
        state.select(record_id)

    def set_search_params(self, params: Mapping[str, Any]) -> None:
        """Forward each key/value pair to the collection's filters."""
        state = self.state
        if state is None or not isinstance(params, Mapping):
            return

        for key, value in params.items():
            state.collection.set_filter(key, value)

    def destroy(self) -> None:
        state = self.registry.discard(self.element)
        if state is None:
            return

        if state.controller is not None:
            state.controller.deactivate()
        self.element.off(f".{NAMESPACE}")
        self.element.remove_class(self.settings.busy_class)
        state.release()

        logger.debug("Binding destroyed", search_field=state.search_field)


def create_binding(
    element: InputElement,
    options: Union[BindingOptions, Mapping[str, Any], None] = None,
    **kwargs: Any,
) -> Binding:
    """Attach a record picker to ``element`` and return its Binding."""
    return Binding(element, **kwargs).attach(options)
