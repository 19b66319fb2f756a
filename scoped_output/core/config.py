"""
Session configuration.
"""

from dataclasses import dataclass

# Id of the plain text format, activated by OutputSession.initialize() when registered.
FORMAT_ID_FOR_TEXT = 3


@dataclass
class OutputConfig:
    """Tunables for an output session."""
    default_format_id: int = FORMAT_ID_FOR_TEXT
    max_scope_depth: int = 15
    format_separator: str = ", "

    def __post_init__(self):
        if self.max_scope_depth < 1:
            raise ValueError(f"max_scope_depth must be positive, got {self.max_scope_depth}")
