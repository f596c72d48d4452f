"""
Module: session.crop_state

Purpose:
    Crop state machine: Idle or Cropping(entry, original). At most one
    entry is cropped at a time. Every transition out of Cropping releases
    the transient original exactly once.

Key Classes:
    - Idle / Cropping: States
    - CropSession: Transitions (begin, apply, cancel, delete_entry, select_file)

Dependencies:
    - session.entries: EntryStore
    - builder.images.cropper: crop_raster
    - upload.client: UploadClient (TIFF conversion)

Used By:
    - Front ends driving file selection and crop dialogs
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Tuple, Union

from proofsheet.builder.images.cropper import (
    DEFAULT_CROP_QUALITY,
    DEFAULT_MAX_DIMENSION_PX,
    crop_raster,
)
from proofsheet.core.models.entry import Entry
from proofsheet.core.models.raster import RasterHandle

from .entries import EntryStore

if TYPE_CHECKING:
    from proofsheet.upload.client import UploadClient

logger = logging.getLogger(__name__)

# File types routed through the conversion service
CONVERTED_SUFFIXES = frozenset({".tif", ".tiff"})


@dataclass(frozen=True)
class Idle:
    """No crop dialog open."""


@dataclass(frozen=True)
class Cropping:
    """Crop dialog open for one entry."""

    entry_id: str
    original: RasterHandle


class CropSession:
    """
    Crop workflow over an EntryStore.

    Example:
        >>> crop = CropSession(store)
        >>> crop.begin(entry.entry_id, RasterHandle.from_path("photo.jpg"))
        >>> crop.apply_box((0, 0, 800, 600))
        >>> crop.is_cropping
        False
    """

    def __init__(self, store: EntryStore) -> None:
        self._store = store
        self._state: Union[Idle, Cropping] = Idle()

    @property
    def state(self) -> Union[Idle, Cropping]:
        return self._state

    @property
    def is_cropping(self) -> bool:
        return isinstance(self._state, Cropping)

    @property
    def cropping_entry_id(self) -> Optional[str]:
        return self._state.entry_id if isinstance(self._state, Cropping) else None

    # ─────────────────────────────────────────────────────────────────────
    # Transitions
    # ─────────────────────────────────────────────────────────────────────

    def begin(self, entry_id: str, original: RasterHandle) -> Cropping:
        """
        Open the crop dialog for an entry.

        An uncommitted crop on another (or the same) entry is abandoned
        and its original released.

        Raises:
            KeyError: If entry_id is unknown
        """
        self._store.get(entry_id)
        if isinstance(self._state, Cropping):
            logger.debug(f"Abandoning uncommitted crop of {self._state.entry_id}")
            self._close()

        self._store.update(entry_id, original_image=original)
        self._state = Cropping(entry_id=entry_id, original=original)
        logger.debug(f"Cropping entry {entry_id} from {original!r}")
        return self._state

    def apply(self, cropped: RasterHandle) -> Entry:
        """
        Commit a cropped raster as the entry's finalized image.

        If the entry has disappeared from the store, the crop is abandoned:
        both rasters are released and the session goes Idle.

        Raises:
            RuntimeError: If no crop is in progress
            KeyError: If the cropped entry no longer exists
        """
        state = self._require_cropping()
        try:
            previous = self._store.get(state.entry_id).image
            entry = self._store.update(state.entry_id, image=cropped, original_image=None)
        except KeyError:
            logger.warning(f"Cropped entry {state.entry_id} no longer exists, discarding crop")
            cropped.release()
            state.original.release()
            self._state = Idle()
            raise
        if previous is not None and previous is not cropped:
            previous.release()
        state.original.release()
        self._state = Idle()
        logger.info(f"Applied crop to entry {state.entry_id}")
        return entry

    def apply_box(
        self,
        box: Tuple[int, int, int, int],
        *,
        max_dimension: int = DEFAULT_MAX_DIMENSION_PX,
        quality: float = DEFAULT_CROP_QUALITY,
    ) -> Entry:
        """
        Crop the original to box and commit the result.

        Raises:
            RuntimeError: If no crop is in progress
            ValueError: If box is outside the image
            DecodeError: If the original cannot be decoded
        """
        state = self._require_cropping()
        cropped = crop_raster(state.original, box, max_dimension=max_dimension, quality=quality)
        return self.apply(cropped)

    def cancel(self) -> None:
        """Close the crop dialog without changing the finalized image."""
        if not isinstance(self._state, Cropping):
            return
        logger.debug(f"Cancelled crop of {self._state.entry_id}")
        self._close()

    def delete_entry(self, entry_id: str) -> Entry:
        """
        Delete an entry, ending its crop first if one is open.

        The store releases the entry's rasters; the crop state does not
        release them a second time.
        """
        if isinstance(self._state, Cropping) and self._state.entry_id == entry_id:
            self._state = Idle()
        return self._store.delete(entry_id)

    def select_file(
        self,
        entry_id: str,
        path: Union[str, Path],
        client: Optional["UploadClient"] = None,
    ) -> Cropping:
        """
        Load a user-selected file and open the crop dialog.

        TIFF files go through the conversion service; other files are
        used directly. If the upload fails nothing changes.

        Raises:
            KeyError: If entry_id is unknown
            UploadError: If the conversion service fails
            ValueError: If a TIFF is selected without a client
        """
        path = Path(path)
        self._store.get(entry_id)

        if path.suffix.lower() in CONVERTED_SUFFIXES:
            if client is None:
                raise ValueError(f"{path.name} needs the conversion service")
            original = client.upload(path)
        else:
            original = RasterHandle.from_path(path)

        return self.begin(entry_id, original)

    # ─────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────

    def _require_cropping(self) -> Cropping:
        if not isinstance(self._state, Cropping):
            raise RuntimeError("No crop in progress")
        return self._state

    def _close(self) -> None:
        """Clear the entry's original, release it and go Idle."""
        state = self._state
        try:
            self._store.update(state.entry_id, original_image=None)
        except KeyError:
            logger.warning(f"Cropped entry {state.entry_id} no longer exists")
        state.original.release()
        self._state = Idle()
