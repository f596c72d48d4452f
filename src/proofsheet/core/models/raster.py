"""
Module: raster

Purpose:
    Provides RasterHandle - a reference to encoded image bytes with an
    explicit ownership tag. Temporary handles own a temp file written by
    this library and delete it on release; externally owned handles never
    touch their backing resource.

Key Classes:
    - Ownership: owned-temporary vs externally-owned
    - RasterHandle: encoded image reference with release hook
    - RasterReleasedError: read attempted after release

Dependencies:
    - tempfile (std)
    - pathlib (std)

Used By:
    - core.models.entry.Entry
    - builder.images: rotation and cropping
    - session: crop state machine release hooks
    - upload.client: decoded service payloads
"""

from __future__ import annotations

import logging
import os
import tempfile
from enum import Enum
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


class RasterReleasedError(Exception):
    """Raster handle was read after its temporary resource was released."""
    pass


class Ownership(str, Enum):
    """Who is responsible for the handle's backing resource."""

    OWNED_TEMPORARY = "owned-temporary"
    EXTERNALLY_OWNED = "externally-owned"


class RasterHandle:
    """
    Reference to an encoded raster (file on disk or bytes in memory).

    Attributes:
        path: Backing file, or None for in-memory handles
        ownership: Ownership tag deciding what release() does
        name: Display name (original file name where known)

    Invariants:
        - A temporary handle's file is deleted at most once
        - Externally owned resources are never deleted

    Example:
        >>> handle = RasterHandle.from_bytes(png_bytes, temporary=True)
        >>> handle.release()
        True
        >>> handle.release()  # second release is a no-op
        False
    """

    def __init__(
        self,
        *,
        path: Optional[Path] = None,
        data: Optional[bytes] = None,
        ownership: Ownership = Ownership.EXTERNALLY_OWNED,
        name: Optional[str] = None,
    ) -> None:
        if (path is None) == (data is None):
            raise ValueError("RasterHandle needs exactly one of path or data")
        if ownership is Ownership.OWNED_TEMPORARY and path is None:
            raise ValueError("Temporary handles must be backed by a file")
        self.path = Path(path) if path is not None else None
        self._data = data
        self.ownership = ownership
        self.name = name or (self.path.name if self.path else "raster")
        self._released = False

    # ─────────────────────────────────────────────────────────────────────
    # Constructors
    # ─────────────────────────────────────────────────────────────────────

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "RasterHandle":
        """Wrap a caller-owned file; release never deletes it."""
        return cls(path=Path(path), ownership=Ownership.EXTERNALLY_OWNED)

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        *,
        temporary: bool = False,
        suffix: str = ".png",
        name: Optional[str] = None,
    ) -> "RasterHandle":
        """
        Wrap encoded bytes.

        Args:
            data: Encoded image bytes
            temporary: If True, spill to a temp file this handle owns
            suffix: Temp file suffix (only used when temporary)
            name: Optional display name

        Returns:
            New RasterHandle
        """
        if not temporary:
            return cls(data=data, ownership=Ownership.EXTERNALLY_OWNED, name=name)

        fd, tmp_name = tempfile.mkstemp(prefix="proofsheet-", suffix=suffix)
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        logger.debug(f"Spilled {len(data)} bytes to temporary raster {tmp_name}")
        return cls(path=Path(tmp_name), ownership=Ownership.OWNED_TEMPORARY, name=name)

    # ─────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────

    @property
    def is_temporary(self) -> bool:
        """True if this handle owns its backing file."""
        return self.ownership is Ownership.OWNED_TEMPORARY

    @property
    def released(self) -> bool:
        """True once release() has run on a temporary handle."""
        return self._released

    # ─────────────────────────────────────────────────────────────────────
    # Access / lifecycle
    # ─────────────────────────────────────────────────────────────────────

    def read_bytes(self) -> bytes:
        """
        Return the encoded bytes.

        Raises:
            RasterReleasedError: If the temporary file was already released
            OSError: If an external file cannot be read
        """
        if self._released:
            raise RasterReleasedError(f"Raster {self.name} was already released")
        if self._data is not None:
            return self._data
        return self.path.read_bytes()

    def release(self) -> bool:
        """
        Release the backing resource if this handle owns it.

        Returns:
            True if a temporary file was deleted by this call
        """
        if not self.is_temporary or self._released:
            return False
        self._released = True
        try:
            self.path.unlink()
        except FileNotFoundError:
            logger.warning(f"Temporary raster already gone: {self.path}")
            return False
        logger.debug(f"Released temporary raster {self.path}")
        return True

    def __repr__(self) -> str:
        where = str(self.path) if self.path else f"<{len(self._data)} bytes>"
        return f"RasterHandle({where}, {self.ownership.value})"
