"""
Preview Providers

A preview handle is the display resource a front end shows for a slot's
image. Handles are acquired when an image is placed in a slot and released
explicitly when the slot is replaced or cleared.
"""

from __future__ import annotations

import io
import itertools
import shutil
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from teotlan.core.config import PreviewConfig
from teotlan.core.constants import DEFAULT_THUMBNAIL_SIZE
from teotlan.core.exceptions import EncodingError
from teotlan.core.logging_config import get_logger
from teotlan.studio.models import SourceImage

logger = get_logger("studio.previews")

_handle_ids = itertools.count(1)


@dataclass(eq=False)
class PreviewHandle:
    """Opaque display reference bound to one SourceImage."""
    handle_id: int
    image: SourceImage
    location: Optional[Path] = None
    owned: bool = False  # True when location is a file this handle must delete
    released: bool = False


class PreviewProvider(ABC):
    """Acquires and releases preview handles."""

    @abstractmethod
    def acquire(self, image: SourceImage) -> PreviewHandle:
        """Allocate a preview for an image."""
        pass

    @abstractmethod
    def _dispose(self, handle: PreviewHandle) -> None:
        """Free the resources behind a handle."""
        pass

    def release(self, handle: PreviewHandle) -> None:
        """Release a handle. Releasing twice is a no-op."""
        if handle.released:
            return
        self._dispose(handle)
        handle.released = True

    def close(self) -> None:
        """Free provider-wide resources. Handles must already be released."""
        pass


class NullPreviewProvider(PreviewProvider):
    """Handles with no backing resource, for headless use."""

    def acquire(self, image: SourceImage) -> PreviewHandle:
        return PreviewHandle(handle_id=next(_handle_ids), image=image, location=image.path)

    def _dispose(self, handle: PreviewHandle) -> None:
        pass


class ThumbnailPreviewProvider(PreviewProvider):
    """
    Writes a small thumbnail per preview into a scratch directory.

    If the image cannot be decoded the handle points at the source file (or
    nothing, for in-memory images) and release deletes nothing.
    """

    def __init__(
        self,
        scratch_dir: Optional[Path] = None,
        size: Tuple[int, int] = DEFAULT_THUMBNAIL_SIZE
    ):
        self._own_scratch = scratch_dir is None
        self.scratch_dir = Path(scratch_dir) if scratch_dir else Path(tempfile.mkdtemp(prefix="teotlan_previews_"))
        self.scratch_dir.mkdir(parents=True, exist_ok=True)
        self.size = size

    @classmethod
    def from_config(cls, previews: PreviewConfig) -> 'ThumbnailPreviewProvider':
        """Build a provider from the previews section of the config."""
        return cls(scratch_dir=previews.scratch_dir, size=previews.thumbnail_size)

    def acquire(self, image: SourceImage) -> PreviewHandle:
        handle_id = next(_handle_ids)
        dest = self.scratch_dir / f"preview_{handle_id}.png"
        try:
            self._write_thumbnail(image, dest)
        except (OSError, UnidentifiedImageError, ValueError, EncodingError) as e:
            logger.warning(f"Failed to generate preview for {image.name}: {e}")
            return PreviewHandle(handle_id=handle_id, image=image, location=image.path)

        logger.debug(f"Generated preview: {dest}")
        return PreviewHandle(handle_id=handle_id, image=image, location=dest, owned=True)

    def _write_thumbnail(self, image: SourceImage, dest: Path) -> None:
        if image.path is not None:
            source = image.path
        else:
            source = io.BytesIO(image.read_bytes())

        with Image.open(source) as img:
            img.thumbnail(self.size, Image.Resampling.LANCZOS)
            if img.mode not in ('RGB', 'RGBA'):
                img = img.convert('RGBA')
            img.save(dest, 'PNG', optimize=True)

    def _dispose(self, handle: PreviewHandle) -> None:
        if handle.owned and handle.location is not None:
            handle.location.unlink(missing_ok=True)
            logger.debug(f"Released preview: {handle.location}")

    def close(self) -> None:
        """Remove the scratch directory if this provider created it."""
        if self._own_scratch:
            shutil.rmtree(self.scratch_dir, ignore_errors=True)
