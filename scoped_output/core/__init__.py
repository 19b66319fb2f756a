"""
Core modules for format-agnostic structured output: escaping, format
registry and the output session state machine.
"""

from .config import OutputConfig
from .entities import EntityTable, escape
from .errors import (
    OutputError, AllocationError, DuplicateFormatError, FormatNotFoundError,
    OutputStateError, NoActiveFormatError, DocumentStateError, ScopeStackError,
    PluginError
)
from .formats import EventType, OutputFormat
from .registry import FormatRegistry
from .session import OutputSession

__all__ = [
    'OutputConfig',
    'EntityTable',
    'escape',
    'EventType',
    'OutputFormat',
    'FormatRegistry',
    'OutputSession',
    'OutputError',
    'AllocationError',
    'DuplicateFormatError',
    'FormatNotFoundError',
    'OutputStateError',
    'NoActiveFormatError',
    'DocumentStateError',
    'ScopeStackError',
    'PluginError'
]
