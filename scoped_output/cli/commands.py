"""
Command-line interface for scoped-output.

This module provides CLI commands for listing the available output
formats and rendering a recorded event stream in one of them.
"""

import sys
import json
import click
import logging
from typing import Dict, List, Optional
from rich.console import Console
from rich.markup import escape as markup_escape

from ..core.config import OutputConfig
from ..core.errors import FormatNotFoundError, OutputStateError, PluginError
from ..core.formats import EventType
from ..core.registry import FormatRegistry
from ..core.session import OutputSession
from ..plugins import PluginLoader

# Rendered output owns stdout; messages go to stderr
console = Console(stderr=True)

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version="1.0.0")
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
def main(verbose):
    """scoped-output - Render structured document events as text, CSV and more."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        console.print("[dim]Verbose mode enabled[/dim]")


@main.command()
@click.option('--separator', '-s', default=", ", show_default=True, help='Separator between format names')
def formats(separator):
    """List the supported output formats."""
    registry = FormatRegistry()
    loader = PluginLoader(registry)

    try:
        loader.load_builtin()
        names, total = registry.available_names(separator)
        click.echo(f"supported formats: {names}")
        logger.debug(f"{total} formats registered")
    except PluginError as e:
        console.print(f"[red]Failed to load plugins: {markup_escape(str(e))}[/red]")
        sys.exit(1)
    finally:
        loader.shutdown_all()


@main.command()
@click.argument('events', type=click.File('r'))
@click.option('--format', '-f', 'format_name', default='csv', show_default=True, help='Output format name')
@click.option('--max-depth', default=15, show_default=True, type=click.IntRange(min=1),
              help='Maximum scope nesting depth')
def render(events, format_name, max_depth):
    """Render a JSON array of events (use - for stdin) in the chosen format."""
    try:
        records = json.load(events)
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid event file: {markup_escape(str(e))}[/red]")
        sys.exit(1)

    if not isinstance(records, list):
        console.print("[red]Invalid event file: expected a JSON array of events[/red]")
        sys.exit(1)

    registry = FormatRegistry()
    loader = PluginLoader(registry)
    session = OutputSession(registry, OutputConfig(max_scope_depth=max_depth))

    try:
        loader.load_builtin()
        session.initialize()
        session.set_command_line(sys.argv)
        logger.debug(f"Command line: {session.command_line}")

        try:
            session.set_active_format_by_name(format_name)
        except FormatNotFoundError as e:
            console.print(f"[red]Unknown format '{markup_escape(format_name)}'[/red]")
            console.print(f"supported formats: {markup_escape(e.available or '')}")
            sys.exit(1)

        replay_events(session, records)

    except PluginError as e:
        console.print(f"[red]Failed to load plugins: {markup_escape(str(e))}[/red]")
        sys.exit(1)
    except ValueError as e:
        console.print(f"[red]Invalid event: {markup_escape(str(e))}[/red]")
        sys.exit(1)
    except OutputStateError as e:
        console.print(f"[red]Event stream out of order: {markup_escape(str(e))}[/red]")
        sys.exit(2)
    finally:
        loader.shutdown_all()
        session.terminate()


def replay_events(session: OutputSession, records: List[Dict]) -> int:
    """
    Feed recorded events to a session.

    Args:
        session: Session with an active format
        records: Dicts with an "event" name and optional "name", "key", "value"

    Returns:
        Number of events replayed

    Raises:
        ValueError: If a record is malformed
    """
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise ValueError(f"event #{index} is not an object")

        try:
            event = EventType(record.get('event'))
        except ValueError:
            raise ValueError(f"event #{index} has unknown type {record.get('event')!r}")

        if event == EventType.DOCUMENT_OPEN:
            session.open_document(_text(record, 'name'))
        elif event == EventType.DOCUMENT_CLOSE:
            session.close_document()
        elif event == EventType.SCOPE_OPEN:
            if record.get('name') is None:
                raise ValueError(f"event #{index} opens a scope without a name")
            session.open_scope(_text(record, 'name'))
        elif event == EventType.SCOPE_CLOSE:
            session.close_scope()
        else:
            session.emit_attribute(_text(record, 'key'), _text(record, 'value'))

    return len(records)


def _text(record: Dict, field: str) -> Optional[str]:
    value = record.get(field)
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        raise ValueError(f"field '{field}' must be a string, got {type(value).__name__}")
    return str(value)


if __name__ == '__main__':
    main()
