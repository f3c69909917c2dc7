"""Search cycle: the autocomplete data source backed by a collection."""

from dataclasses import dataclass
from typing import Any, Optional

import structlog

from recordpicker.config import Settings
from recordpicker.components.autocomplete import Respond
from recordpicker.core.protocols import InputElement
from recordpicker.core.state import BindingState

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Candidate:
    """A label/value pair offered in the result list."""

    label: str
    value: Optional[Any] = None

    @property
    def is_sentinel(self) -> bool:
        """Sentinel rows ("no matches", "error") carry no record id."""
        return self.value is None


class SearchCycle:
    """
    Fetch one page of matches for a typed term.

    Called by the autocomplete primitive as ``await cycle(request, respond)``.
    The input carries the busy class while the fetch is in flight. An empty
    page is answered with a single "no matches" sentinel, a failed fetch with
    a single "error" sentinel. Answers arriving after the binding was
    destroyed are dropped.
    """

    def __init__(self, element: InputElement, state: BindingState, settings: Settings):
        self.element = element
        self.state = state
        self.settings = settings

    def _to_candidate(self, record: Any) -> Candidate:
        label = record.get(self.state.label_field)
        return Candidate(
            label="" if label is None else str(label),
            value=record.get("id"),
        )

    async def __call__(self, request: Any, respond: Respond) -> None:
        state = self.state
        busy = self.settings.busy_class
        term = request.term

        self.element.add_class(busy)
        state.collection.set_filter(state.search_field, term)
        state.collection.set_page_size(self.settings.page_size)

        logger.debug("Searching collection", field=state.search_field, term=term)

        try:
            await state.collection.fetch()
        except Exception as e:
            logger.warning("Search failed", term=term, error=str(e))
            if not state.attached:
                return
            self.element.remove_class(busy)
            respond([Candidate(label=self.settings.search_error_label)])
            return

        if not state.attached:
            logger.debug("Dropping search result for detached input", term=term)
            return

        candidates = [self._to_candidate(record) for record in state.collection]
        if not candidates:
            candidates.append(Candidate(label=self.settings.no_matches_label))

        logger.debug("Search finished", term=term, count=len(candidates))

        self.element.remove_class(busy)
        respond(candidates)
