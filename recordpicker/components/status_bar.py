"""Status bar component."""

from typing import Optional

from rich.text import Text
from textual.reactive import reactive
from textual.widgets import Static

from recordpicker.core.binding import BoundValue


class StatusBar(Static):
    """One line summarising the bound record, the last search and the change count."""

    bound_id: reactive[str] = reactive("")
    bound_name: reactive[str] = reactive("")
    term: reactive[str] = reactive("")
    searching: reactive[bool] = reactive(False)
    changes: reactive[int] = reactive(0)

    def render(self) -> Text:
        text = Text()

        if self.bound_id:
            text.append(self.bound_name, style="bold green")
            text.append(f" #{self.bound_id}", style="dim")
        else:
            text.append("nothing bound", style="dim italic")

        if self.term:
            text.append("  ·  ")
            if self.searching:
                text.append("searching ", style="yellow")
            else:
                text.append("last search ", style="dim")
            text.append(f'"{self.term}"', style="cyan")

        if self.changes:
            suffix = "" if self.changes == 1 else "s"
            text.append(f"  ·  {self.changes} change{suffix}", style="dim")

        return text

    def record_change(self, value: BoundValue) -> None:
        """Show a value announced by the picker."""
        self.bound_id = "" if value.id is None else str(value.id)
        self.bound_name = value.name
        self.changes += 1

    def search_started(self, term: Optional[str]) -> None:
        self.term = term or ""
        self.searching = True

    def reset(self) -> None:
        self.bound_id = ""
        self.bound_name = ""
        self.term = ""
        self.searching = False
        self.changes = 0
