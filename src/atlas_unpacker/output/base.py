"""Base class for archive output providers."""

from abc import ABC, abstractmethod
from typing import Iterable

from ..errors import ArchiveFinalizeError, ArchiveFinalizedError, DuplicateEntryError


class OutputProvider(ABC):
    """
    Collects named entries and serializes them into one archive.

    Entries are added one by one, then ``finalize`` is called exactly once;
    after that the provider accepts no more entries.
    """

    def __init__(self, path: str = ""):
        """
        Initialize the provider with an output file path.

        Args:
            path: Path to the output file
        """
        self.path = path
        self._entries: dict[str, bytes] = {}
        self._finalized = False

    @property
    @abstractmethod
    def output_format(self) -> str:
        """Format identifier (for example, ``zip``)."""
        raise NotImplementedError

    @property
    def entry_names(self) -> list[str]:
        return list(self._entries)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def add_entry(self, name: str, data: bytes) -> None:
        """
        Add one named entry.

        Raises:
            DuplicateEntryError: If an entry with this name exists
            ArchiveFinalizedError: If the archive was already finalized
        """
        if self._finalized:
            raise ArchiveFinalizedError(f"Cannot add '{name}': archive already finalized")
        if name in self._entries:
            raise DuplicateEntryError(f"Duplicate archive entry: {name}")
        self._entries[name] = data

    def finalize(self) -> bytes:
        """
        Serialize all entries into the archive bytes.

        Raises:
            ArchiveFinalizedError: If called more than once
            ArchiveFinalizeError: If serialization fails
        """
        if self._finalized:
            raise ArchiveFinalizedError("Archive already finalized")
        self._finalized = True
        try:
            return self.serialize(self._entries.items())
        except (OSError, ValueError) as e:
            raise ArchiveFinalizeError(f"Failed to build {self.output_format} archive: {e}") from e

    @abstractmethod
    def serialize(self, entries: Iterable[tuple[str, bytes]]) -> bytes:
        """
        Encode entries into the archive format.

        Args:
            entries: (name, bytes) pairs in insertion order

        Returns:
            Archive as bytes
        """
        raise NotImplementedError

    def write(self, data: bytes) -> None:
        """
        Write archive data to a file.

        Args:
            data: Finalized archive bytes
        """
        if not self.path:
            raise ValueError("Output path not set")
        with open(self.path, "wb") as f:
            f.write(data)
