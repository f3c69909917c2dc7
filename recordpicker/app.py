"""Record picker demo - Textual application."""

from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import Footer, Header, Static

from recordpicker.api import ApiClient
from recordpicker.components.picker import RecordPicker
from recordpicker.components.status_bar import StatusBar


class PickerApp(App):
    """Pick a record from a remote collection."""

    TITLE = "Record Picker"

    CSS = """
    #main {
        padding: 1 2;
    }
    #picker-label {
        margin-bottom: 1;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+r", "reset", "Clear"),
    ]

    def __init__(
        self,
        resource: str,
        search_param: str,
        label_field: Optional[str] = None,
        base_url: Optional[str] = None,
    ):
        super().__init__()
        self.resource = resource
        self.api = ApiClient(base_url=base_url)
        self.picker_options = {
            "model": self.api.record(resource),
            "collection": self.api.collection(resource),
            "search_param": search_param,
            "label_field": label_field,
        }

    def compose(self) -> ComposeResult:
        yield Header()

        with Container(id="main"):
            yield Static(f"[bold]{self.resource}[/]", id="picker-label")
            yield RecordPicker(self.picker_options, id="picker")

        yield StatusBar(id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        """Open the HTTP client and follow the picker's search state."""
        self.api.open()
        self.sub_title = f"Searching {self.api.base_url}"

        picker = self.query_one("#picker", RecordPicker)
        self.watch(picker, "searching", self._on_searching, init=False)

    async def on_unmount(self) -> None:
        await self.api.close()

    def _on_searching(self, searching: bool) -> None:
        picker = self.query_one("#picker", RecordPicker)
        status_bar = self.query_one("#status-bar", StatusBar)
        if searching and picker.autocomplete:
            status_bar.search_started(picker.autocomplete.term)
        else:
            status_bar.searching = False

    def on_record_picker_changed(self, event: RecordPicker.Changed) -> None:
        """Reflect the bound value in the status bar."""
        self.query_one("#status-bar", StatusBar).record_change(event.value)

    def action_reset(self) -> None:
        picker = self.query_one("#picker", RecordPicker)
        if picker.binding and picker.element:
            picker.binding.destroy()
            picker.element.value = ""
            picker.binding.attach(self.picker_options)
            if picker.element.has_focus:
                # A fresh binding builds its autocomplete on focus
                picker.element.blur()
                picker.element.focus()
        self.query_one("#status-bar", StatusBar).reset()


def run_app(
    resource: str,
    search_param: str,
    label_field: Optional[str] = None,
    base_url: Optional[str] = None,
) -> None:
    """Run the record picker demo."""
    app = PickerApp(resource, search_param, label_field=label_field, base_url=base_url)
    app.run()
