"""
Output Format Module

Defines the event types a session dispatches and the abstract base class
every concrete output format (text, csv, xml, html, ...) implements.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, TextIO
import logging

from .entities import EntityTable, escape

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Kinds of events a session hands to a format."""
    DOCUMENT_OPEN = "document_open"
    DOCUMENT_CLOSE = "document_close"
    SCOPE_OPEN = "scope_open"
    SCOPE_CLOSE = "scope_close"
    ATTRIBUTE = "attribute"


class OutputFormat(ABC):
    """
    Base class for output formats.

    Subclasses set the class attributes and implement emit(). The default
    escape() runs the shared escaper with the format's entity table,
    enclosing triggers and delimiter.
    """

    id: int = 0
    name: str = ""
    entities: EntityTable = EntityTable()
    enclosing_triggers: tuple = ()
    delimiter: str = '"'

    def escape(self, value: Optional[str]) -> Optional[str]:
        """Escape a key or value; None stays None."""
        return escape(value, self.entities, self.enclosing_triggers, self.delimiter)

    @abstractmethod
    def emit(self, out: TextIO, event: EventType, level: int,
             key: Optional[str] = None, value: Optional[str] = None) -> None:
        """
        Render one event.

        Args:
            out: Stream to write to
            event: The event being rendered
            level: Nesting level computed by the session
            key: Document/scope name or attribute key, if any
            value: Attribute value, if any
        """

    def __repr__(self):
        return f"{type(self).__name__}(id={self.id}, name='{self.name}')"
