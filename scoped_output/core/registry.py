"""
Format Registry Module

This module keeps the set of output formats known to the process and
resolves them by numeric id or by name.
"""

from typing import Iterator, List, Optional, Tuple
import logging

from .errors import AllocationError, DuplicateFormatError
from .formats import OutputFormat

logger = logging.getLogger(__name__)


class FormatRegistry:
    """
    Registry of output formats.

    This class provides:
    - Registration and removal of formats (unique by id and by name)
    - Lookup by id or by exact, case-sensitive name
    - A joined list of names for help and usage text
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._formats: List[OutputFormat] = []

    def register(self, fmt: OutputFormat) -> None:
        """
        Add a format to the registry.

        Raises:
            DuplicateFormatError: If the id or the name is already taken
            AllocationError: If storage for the entry cannot be obtained
        """
        for existing in self._formats:
            if existing.id == fmt.id or existing.name == fmt.name:
                logger.error(f"Refusing to register {fmt!r}: conflicts with {existing!r}")
                raise DuplicateFormatError(fmt.id, fmt.name)

        try:
            self._formats.append(fmt)
        except MemoryError as e:
            raise AllocationError(f"allocation failed for format entry '{fmt.name}'") from e

        logger.debug(f"Registered output format {fmt!r}")

    def unregister(self, fmt: OutputFormat) -> None:
        """Remove the entry with the same id; does nothing if there is none."""
        for index, existing in enumerate(self._formats):
            if existing.id == fmt.id:
                del self._formats[index]
                logger.debug(f"Unregistered output format {existing!r}")
                return

    def unregister_all(self) -> None:
        """Remove every registered format."""
        self._formats.clear()

    def lookup_by_id(self, format_id: int) -> Optional[OutputFormat]:
        """Find a format by id."""
        for fmt in self._formats:
            if fmt.id == format_id:
                return fmt
        return None

    def lookup_by_name(self, name: str) -> Optional[OutputFormat]:
        """Find a format by exact name."""
        for fmt in self._formats:
            if fmt.name == name:
                return fmt
        return None

    def available_names(self, separator: str = ", ",
                        max_length: Optional[int] = None) -> Tuple[str, int]:
        """
        Join the names of all registered formats.

        Args:
            separator: Text placed between names
            max_length: Longest result allowed; longer text is truncated

        Returns:
            Tuple of (joined_names, total_registered). The count covers every
            format even when the joined text was truncated.
        """
        total = len(self._formats)
        if max_length is None:
            return separator.join(fmt.name for fmt in self._formats), total

        limit = max(max_length, 0)
        joined = ""
        for index, fmt in enumerate(self._formats):
            if index:
                # A separator that does not fit whole is dropped along with what follows
                if len(joined) + len(separator) >= limit:
                    break
                joined += separator
            if len(joined) + len(fmt.name) > limit:
                joined += fmt.name[:limit - len(joined)]
                break
            joined += fmt.name

        if len(joined) < len(separator.join(fmt.name for fmt in self._formats)):
            logger.debug(f"Format list truncated to {len(joined)} characters ({total} formats)")

        return joined, total

    def __len__(self) -> int:
        return len(self._formats)

    def __iter__(self) -> Iterator[OutputFormat]:
        return iter(list(self._formats))

    def __contains__(self, fmt: object) -> bool:
        if not isinstance(fmt, OutputFormat):
            return False
        return self.lookup_by_id(fmt.id) is not None

    def __repr__(self):
        return f"FormatRegistry(formats={[fmt.name for fmt in self._formats]})"
