"""
CSV Output Plugin

Renders session events as comma-separated values.

Fields are enclosed in double quotes when they contain a line break, a
double quote or a comma. Double quotes inside a field are doubled, and
line breaks are written as the two characters backslash and n rather
than kept raw inside the quotes.

Known limitation: records do not all carry the same number of fields.
A scope name or a key-only attribute is written on a line of its own.
"""

from typing import Optional, TextIO
import logging

from ..core.entities import EntityTable
from ..core.formats import EventType, OutputFormat
from ..core.registry import FormatRegistry

logger = logging.getLogger(__name__)

FORMAT_ID = 1
FORMAT_NAME = "csv"

PLUGIN_TYPE = "output"
PLUGIN_NAME = FORMAT_NAME

CSV_ENTITIES = EntityTable({
    '\n': '\\n',
    '"': '""',
})


class CsvFormat(OutputFormat):
    """CSV output format. The nesting level is ignored; CSV does not indent."""

    id = FORMAT_ID
    name = FORMAT_NAME
    entities = CSV_ENTITIES
    enclosing_triggers = ('\n', '"', ',')
    delimiter = '"'

    def emit(self, out: TextIO, event: EventType, level: int,
             key: Optional[str] = None, value: Optional[str] = None) -> None:
        escaped_key = self.escape(key)
        escaped_value = self.escape(value)

        if event == EventType.SCOPE_OPEN:
            out.write(f"\n{escaped_key}\n")
        elif event == EventType.SCOPE_CLOSE:
            out.write("\n")
        elif event == EventType.ATTRIBUTE:
            if key is not None and value is not None:
                out.write(f"{escaped_key},{escaped_value}\n")
            elif key is not None:
                out.write(f"\n{escaped_key}\n")
            elif value is not None:
                out.write(f",{escaped_value}\n")
        # DOCUMENT_OPEN and DOCUMENT_CLOSE produce nothing.


FORMAT = CsvFormat()


def plugin_loaded() -> int:
    logger.debug(f"Loading {PLUGIN_TYPE} plugin {PLUGIN_NAME}")
    return 0


def plugin_unloaded() -> None:
    logger.debug(f"Unloading {PLUGIN_TYPE} plugin {PLUGIN_NAME}")


def plugin_initialize(registry: FormatRegistry) -> int:
    """Register the CSV format."""
    registry.register(FORMAT)
    return 0


def plugin_shutdown(registry: FormatRegistry) -> None:
    """Unregister the CSV format."""
    registry.unregister(FORMAT)
