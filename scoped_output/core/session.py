"""
Output Session Module

This module provides the state machine producers drive to emit a
document made of nested scopes and key/value attributes. The session
tracks whether a document is open and which scopes are open, computes
the nesting level of each event and hands it to the active format.
"""

import sys
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence, TextIO
import logging

from .config import OutputConfig
from .errors import (
    AllocationError, DocumentStateError, FormatNotFoundError,
    NoActiveFormatError, ScopeStackError
)
from .formats import EventType, OutputFormat
from .registry import FormatRegistry

logger = logging.getLogger(__name__)


class OutputSession:
    """
    Structured output session.

    This class provides:
    - Document open/close tracking
    - A LIFO stack of open scope names
    - Level computation and dispatch to the active format
    - Selection of the active format by descriptor or by name

    A session is not thread-safe; each thread or test should own its own.
    """

    def __init__(self, registry: FormatRegistry, config: Optional[OutputConfig] = None,
                 stream: Optional[TextIO] = None):
        """
        Initialize the session.

        Args:
            registry: Registry used to resolve formats
            config: Session tunables, defaults to OutputConfig()
            stream: Sink for rendered output; None writes to sys.stdout
        """
        self.registry = registry
        self.config = config or OutputConfig()
        self.stream = stream
        self._format: Optional[OutputFormat] = None
        self._document_open = False
        self._scope_stack: List[str] = []
        self._command_line: Optional[str] = None

    # Lifecycle

    def initialize(self) -> None:
        """Reset state and activate the default format if it is registered."""
        self._document_open = False
        self._scope_stack = []
        self._format = self.registry.lookup_by_id(self.config.default_format_id)
        if self._format is None:
            logger.debug(f"Default format id {self.config.default_format_id} not registered")

    def terminate(self) -> None:
        """Drop the command line and scope stack and unregister every format."""
        if self._scope_stack:
            logger.warning(f"Terminating with open scopes: {self._scope_stack}")
        self._command_line = None
        self._scope_stack = []
        self._document_open = False
        self._format = None
        self.registry.unregister_all()

    # Command line

    @property
    def command_line(self) -> Optional[str]:
        """Argument vector joined with spaces, once set."""
        return self._command_line

    def set_command_line(self, argv: Sequence[str]) -> None:
        """Record the process command line."""
        try:
            self._command_line = " ".join(argv)
        except MemoryError as e:
            raise AllocationError("allocation failed while joining the command line") from e

    # Format selection

    @property
    def active_format(self) -> Optional[OutputFormat]:
        return self._format

    def parse_format(self, name: str) -> Optional[OutputFormat]:
        """Resolve a format name without activating it."""
        return self.registry.lookup_by_name(name)

    def set_active_format(self, fmt: Optional[OutputFormat]) -> None:
        self._format = fmt

    def set_active_format_by_name(self, name: str) -> OutputFormat:
        """
        Activate the format registered under name.

        Raises:
            FormatNotFoundError: If no format has that name
        """
        fmt = self.parse_format(name)
        if fmt is None:
            available, _ = self.registry.available_names(self.config.format_separator)
            raise FormatNotFoundError(name, available)

        self.set_active_format(fmt)
        return fmt

    # State

    @property
    def document_open(self) -> bool:
        return self._document_open

    @property
    def scopes(self) -> List[str]:
        """Open scope names, outermost first."""
        return list(self._scope_stack)

    @property
    def depth(self) -> int:
        return len(self._scope_stack)

    @property
    def level(self) -> int:
        """Level an attribute emitted now would be rendered at."""
        return (1 if self._document_open else 0) + len(self._scope_stack)

    # Events

    def open_document(self, name: Optional[str] = None) -> None:
        """Open the document, dispatching DOCUMENT_OPEN at level 0."""
        fmt = self._require_format("open a document")
        if self._document_open:
            logger.error("output: cannot open a new document while one is already open")
            raise DocumentStateError("a document is already open")

        self._dispatch(fmt, EventType.DOCUMENT_OPEN, 0, name, None)
        self._document_open = True

    def close_document(self) -> None:
        """Close the document, dispatching DOCUMENT_CLOSE at level 0."""
        fmt = self._require_format("close a document")
        if not self._document_open:
            logger.error("output: cannot close a document that has not been opened")
            raise DocumentStateError("no document is open")

        self._dispatch(fmt, EventType.DOCUMENT_CLOSE, 0, None, None)
        self._document_open = False

    def open_scope(self, name: str) -> None:
        """Dispatch SCOPE_OPEN at the current level, then push the scope."""
        fmt = self._require_format("open a scope")
        if not isinstance(name, str):
            logger.error(f"output: scope name must be a string, got {type(name).__name__}")
            raise ValueError(f"scope name must be a string, got {name!r}")
        if len(self._scope_stack) >= self.config.max_scope_depth:
            logger.error(f"output: scope stack exhausted at depth {len(self._scope_stack)}")
            raise ScopeStackError(
                f"cannot open scope '{name}': maximum depth {self.config.max_scope_depth} reached"
            )

        self._dispatch(fmt, EventType.SCOPE_OPEN, self.level, name, None)
        self._scope_stack.append(name)

    def close_scope(self) -> str:
        """
        Pop the innermost scope and dispatch SCOPE_CLOSE at the post-pop level.

        Returns:
            The name of the scope that was closed
        """
        fmt = self._require_format("close a scope")
        if not self._scope_stack:
            logger.error("output: cannot close a scope that has not been opened")
            raise ScopeStackError("cannot close a scope that has not been opened")

        name = self._scope_stack.pop()
        self._dispatch(fmt, EventType.SCOPE_CLOSE, self.level, name, None)
        return name

    def emit_attribute(self, key: Optional[str] = None, value: Optional[str] = None) -> None:
        """Dispatch an ATTRIBUTE event; key, value or both may be None."""
        fmt = self._require_format("emit an attribute")
        self._dispatch(fmt, EventType.ATTRIBUTE, self.level, key, value)

    output = emit_attribute

    @contextmanager
    def document(self, name: Optional[str] = None) -> Iterator["OutputSession"]:
        """Open a document for the duration of a with block."""
        self.open_document(name)
        yield self
        self.close_document()

    @contextmanager
    def scope(self, name: str) -> Iterator["OutputSession"]:
        """Open a scope for the duration of a with block."""
        self.open_scope(name)
        yield self
        self.close_scope()

    # Internals

    def _require_format(self, action: str) -> OutputFormat:
        if self._format is None:
            logger.error(f"output: no active format, cannot {action}")
            raise NoActiveFormatError(f"cannot {action}: no output format is active")
        return self._format

    def _dispatch(self, fmt: OutputFormat, event: EventType, level: int,
                  key: Optional[str], value: Optional[str]) -> None:
        out = self.stream if self.stream is not None else sys.stdout
        fmt.emit(out, event, level, key, value)

    def __repr__(self):
        active = self._format.name if self._format else None
        return (f"OutputSession(format={active!r}, document_open={self._document_open}, "
                f"scopes={self._scope_stack})")
