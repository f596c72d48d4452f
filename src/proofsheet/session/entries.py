"""
Module: session.entries

Purpose:
    Owns the ordered collection of entries. Every mutation goes through a
    named operation and replaces the collection with a new immutable
    snapshot, so callers holding an older snapshot never see it change.

Key Classes:
    - EntryStore: add / update / delete / move

Dependencies:
    - core.models.entry: Entry

Used By:
    - session.crop_state.CropSession
    - builder.controller (via snapshot)
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Tuple

from proofsheet.core.models.entry import Entry

logger = logging.getLogger(__name__)


class EntryStore:
    """
    Ordered, snapshot-based entry collection.

    Example:
        >>> store = EntryStore()
        >>> entry = store.add(title="Route 10")
        >>> before = store.snapshot
        >>> store.update(entry.entry_id, scale=70)
        >>> before[0].scale, store.snapshot[0].scale
        (100, 70)
    """

    def __init__(self, entries: Iterable[Entry] = ()) -> None:
        self._entries: Tuple[Entry, ...] = tuple(entries)

    @property
    def snapshot(self) -> Tuple[Entry, ...]:
        """Current immutable snapshot, in page order."""
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def index_of(self, entry_id: str) -> int:
        """Position of an entry; KeyError if unknown."""
        for i, entry in enumerate(self._entries):
            if entry.entry_id == entry_id:
                return i
        raise KeyError(f"Unknown entry: {entry_id}")

    def get(self, entry_id: str) -> Entry:
        """Entry by id; KeyError if unknown."""
        return self._entries[self.index_of(entry_id)]

    def add(self, **fields) -> Entry:
        """Append a new entry (defaults unless fields are given)."""
        entry = Entry(**fields)
        self._entries = self._entries + (entry,)
        logger.debug(f"Added entry {entry.entry_id} ({len(self._entries)} total)")
        return entry

    def update(self, entry_id: str, **fields) -> Entry:
        """
        Replace fields on one entry.

        scale / offset_x / offset_y are clamped into their domains by Entry.

        Raises:
            KeyError: If entry_id is unknown
            ValueError: If entry_id is changed or rotation is invalid
        """
        if "entry_id" in fields and fields["entry_id"] != entry_id:
            raise ValueError("entry_id cannot be changed")
        index = self.index_of(entry_id)
        updated = self._entries[index].with_changes(**fields)
        self._entries = self._entries[:index] + (updated,) + self._entries[index + 1:]
        return updated

    def delete(self, entry_id: str) -> Entry:
        """
        Remove an entry and release any temporary rasters it held.

        Raises:
            KeyError: If entry_id is unknown
        """
        index = self.index_of(entry_id)
        entry = self._entries[index]
        self._entries = self._entries[:index] + self._entries[index + 1:]
        for handle in (entry.original_image, entry.image):
            if handle is not None:
                handle.release()
        logger.debug(f"Deleted entry {entry_id} ({len(self._entries)} left)")
        return entry

    def move(self, entry_id: str, new_index: int) -> None:
        """
        Reorder an entry to new_index (clamped to the collection bounds).

        Raises:
            KeyError: If entry_id is unknown
        """
        index = self.index_of(entry_id)
        entries = list(self._entries)
        entry = entries.pop(index)
        new_index = max(0, min(len(entries), new_index))
        entries.insert(new_index, entry)
        self._entries = tuple(entries)
