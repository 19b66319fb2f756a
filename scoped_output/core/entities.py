"""
Entity Table and Escaper Module

This module provides the per-format substitution table and the generic
escaping algorithm every output format builds on: decide whether a value
must be enclosed in delimiters, then substitute characters through the
format's entity table.
"""

from collections.abc import Mapping
from typing import Dict, Iterable, Iterator, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

# Byte values 0..254 may carry a replacement; 255 and up always pass through.
MAX_ENTITY_BYTE = 254


class EntityTable(Mapping):
    """
    Read-only mapping from a byte value to its replacement text.

    A byte without an entry is copied unchanged. Characters whose code
    point falls outside 0..254 are never looked up.
    """

    def __init__(self, entities: Optional[Mapping] = None):
        """
        Build the table.

        Args:
            entities: Mapping keyed by byte value (int) or single character (str)
        """
        self._entities: Dict[int, str] = {}

        for key, replacement in (entities or {}).items():
            if isinstance(key, str) and len(key) != 1:
                raise ValueError(f"entity key must be a single character, got {key!r}")
            byte = ord(key) if isinstance(key, str) else key
            if not 0 <= byte <= MAX_ENTITY_BYTE:
                raise ValueError(f"entity byte out of range: {byte}")
            if replacement is None:
                continue
            self._entities[byte] = replacement

    def __getitem__(self, byte: int) -> str:
        return self._entities[byte]

    def __iter__(self) -> Iterator[int]:
        return iter(self._entities)

    def __len__(self) -> int:
        return len(self._entities)

    def replacement_for(self, char: str) -> Optional[str]:
        """Return the replacement for a single character, or None to pass it through."""
        code = ord(char)
        if code > MAX_ENTITY_BYTE:
            return None
        return self._entities.get(code)

    def __repr__(self):
        pairs = ", ".join(f"{chr(b)!r}: {r!r}" for b, r in sorted(self._entities.items()))
        return f"EntityTable({{{pairs}}})"


def substitute(value: str, entities: EntityTable) -> str:
    """Replace every character that has an entry in the table."""
    if not entities:
        return value

    parts = []
    for char in value:
        replacement = entities.replacement_for(char)
        parts.append(char if replacement is None else replacement)
    return "".join(parts)


def enclose(value: str, entities: EntityTable, delimiter: str = '"') -> str:
    """Substitute entities and wrap the result in the format's delimiter."""
    return f"{delimiter}{substitute(value, entities)}{delimiter}"


def needs_enclosing(value: str, triggers: Iterable[str]) -> bool:
    """Check the raw value for any character that forces enclosing."""
    return any(char in value for char in triggers)


def escape(value: Optional[str], entities: EntityTable,
           triggers: Tuple[str, ...] = (), delimiter: str = '"') -> Optional[str]:
    """
    Escape a value for output.

    Args:
        value: Raw value, or None when the field is absent
        entities: The format's entity table
        triggers: Characters that make the value require enclosing
        delimiter: Text placed on both sides of an enclosed value

    Returns:
        The escaped text, or None if the value was absent. Callers print
        nothing for None rather than an empty field.
    """
    if value is None:
        return None

    if triggers and needs_enclosing(value, triggers):
        return enclose(value, entities, delimiter)

    return substitute(value, entities)
