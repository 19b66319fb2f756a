"""
scoped-output

Emit a document of nested scopes and key/value attributes once, and render
it in any registered output format chosen at runtime.
"""

__version__ = "1.0.0"

from .core.config import OutputConfig
from .core.formats import EventType, OutputFormat
from .core.registry import FormatRegistry
from .core.session import OutputSession
from .plugins import PluginLoader
from .plugins.csv import CsvFormat

__all__ = [
    'OutputConfig',
    'EventType',
    'OutputFormat',
    'FormatRegistry',
    'OutputSession',
    'PluginLoader',
    'CsvFormat'
]
