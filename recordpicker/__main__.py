"""Record picker CLI - Entry Point."""

import asyncio
import sys

import click
from rich.console import Console
from rich.text import Text

from recordpicker.api import ApiClient
from recordpicker.components.autocomplete import SearchRequest
from recordpicker.components.text_input import TextInput
from recordpicker.config import get_settings
from recordpicker.core.binding import create_binding
from recordpicker.errors import ConfigurationError
from recordpicker.log import configure_logging

console = Console()


def _target_options(f):
    f = click.option("--url", default=None, help="Base URL of the backing service")(f)
    f = click.option("-l", "--label-field", default=None, help="Record attribute to display")(f)
    f = click.option("-p", "--search-param", required=True, help="Free-text query parameter")(f)
    f = click.option("-r", "--resource", required=True, help="Collection path, e.g. /api/stations")(f)
    return f


@click.group()
@click.option("--log-level", default=None, help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
def main(log_level):
    """Record picker - search remote collections by label."""
    configure_logging(log_level or get_settings().log_level)


@main.command()
@click.argument("term")
@_target_options
def search(term: str, resource: str, search_param: str, label_field: str, url: str):
    """Run one search and print the candidates.

    Example: recordpicker search acme -r /api/advertisers -p name
    """
    async def _search():
        async with ApiClient(base_url=url) as api:
            element = TextInput(name=resource)
            try:
                binding = create_binding(element, {
                    "model": api.record(resource),
                    "collection": api.collection(resource),
                    "search_param": search_param,
                    "label_field": label_field,
                })
            except ConfigurationError as e:
                console.print(f"[red]Error:[/] {e}")
                sys.exit(2)

            candidates = []
            await binding.controller.search(SearchRequest(term), candidates.extend)
            binding.destroy()

        console.print(f"\n[bold]{len(candidates)}[/] candidates for [cyan]\"{term}\"[/]\n")
        for i, candidate in enumerate(candidates, 1):
            line = Text()
            line.append(f"[{i}] ", style="dim")
            if candidate.is_sentinel:
                line.append(candidate.label, style="yellow italic")
            else:
                line.append(candidate.label, style="bold")
                line.append(f"  #{candidate.value}", style="dim cyan")
            console.print(line)
        console.print()

    asyncio.run(_search())


@main.command()
@_target_options
def tui(resource: str, search_param: str, label_field: str, url: str):
    """Launch the interactive picker."""
    from recordpicker.app import run_app
    run_app(resource, search_param, label_field=label_field, base_url=url)


if __name__ == "__main__":
    main()
