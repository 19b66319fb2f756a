"""
Output Errors Module

Exception hierarchy shared by the registry, the session and the plugins.

Two families are kept apart:
- OutputStateError and its subclasses signal a caller ordering bug
  (closing what was never opened, emitting with no format active).
- FormatNotFoundError is an ordinary runtime condition the CLI reports
  to the user.
"""

from typing import Optional


class OutputError(Exception):
    """Base class for every error raised by scoped_output."""


class AllocationError(OutputError, MemoryError):
    """Storage for a registry entry or scope could not be obtained."""


class DuplicateFormatError(OutputError):
    """A format with the same id or name is already registered."""

    def __init__(self, format_id: int, name: str):
        super().__init__(f"format already registered: id={format_id}, name='{name}'")
        self.format_id = format_id
        self.name = name


class FormatNotFoundError(OutputError):
    """No registered format matches the requested name."""

    def __init__(self, name: str, available: Optional[str] = None):
        message = f"unknown output format '{name}'"
        if available:
            message += f" (supported formats: {available})"
        super().__init__(message)
        self.name = name
        self.available = available


class OutputStateError(OutputError):
    """The session was driven in an order its state machine forbids."""


class NoActiveFormatError(OutputStateError):
    """An event was emitted before any format was made active."""


class DocumentStateError(OutputStateError):
    """A document was opened twice or closed without being opened."""


class ScopeStackError(OutputStateError):
    """A scope was closed on an empty stack or the stack is full."""


class PluginError(OutputError):
    """A plugin lifecycle hook failed."""
