"""
Image Slot Manager

Holds the two reference-image slots and owns the lifecycle of their preview
handles. Every mutation releases the slot's previous preview before the new
one is installed, so at most one preview per slot is alive at any time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from teotlan.core.constants import SLOT_ORDER, SlotId
from teotlan.core.logging_config import get_logger
from teotlan.studio.models import SourceImage
from teotlan.studio.previews import NullPreviewProvider, PreviewHandle, PreviewProvider

logger = get_logger("studio.slots")


@dataclass(frozen=True)
class ImageSlot:
    """One slot's contents. ``preview`` is present iff ``file`` is present."""
    file: Optional[SourceImage] = None
    preview: Optional[PreviewHandle] = None

    @property
    def is_empty(self) -> bool:
        return self.file is None


EMPTY_SLOT = ImageSlot()


def _resolve_slot_id(slot_id: Union[SlotId, str]) -> SlotId:
    if isinstance(slot_id, SlotId):
        return slot_id
    return SlotId(str(slot_id).lower())


class ImageSlotManager:
    """
    Manages slots A and B. The manager owns its preview provider: leaving the
    context releases every preview and closes the provider.

    Usage:
        with ImageSlotManager(ThumbnailPreviewProvider()) as slots:
            slots.set_slot(SlotId.A, SourceImage.from_path("cat.jpg"))
            slot_a, slot_b = slots.snapshot()
    """

    def __init__(self, preview_provider: PreviewProvider = None):
        self.preview_provider = preview_provider or NullPreviewProvider()
        self._slots: Dict[SlotId, ImageSlot] = {slot_id: EMPTY_SLOT for slot_id in SLOT_ORDER}

    def set_slot(self, slot_id: Union[SlotId, str], file: Optional[SourceImage]) -> ImageSlot:
        """
        Replace a slot's contents.

        Args:
            slot_id: SlotId.A / SlotId.B (or "a" / "b")
            file: The new image, or None to clear the slot

        Returns:
            The slot as installed
        """
        slot_id = _resolve_slot_id(slot_id)
        previous = self._slots[slot_id]

        if previous.preview is not None:
            self.preview_provider.release(previous.preview)

        if file is None:
            slot = EMPTY_SLOT
            logger.debug(f"Slot {slot_id.value.upper()} cleared")
        else:
            slot = ImageSlot(file=file, preview=self.preview_provider.acquire(file))
            logger.debug(f"Slot {slot_id.value.upper()} set to {file.name} ({file.mime_type})")

        self._slots[slot_id] = slot
        return slot

    def clear_slot(self, slot_id: Union[SlotId, str]) -> None:
        self.set_slot(slot_id, None)

    def clear_all(self) -> None:
        """Empty both slots, releasing their previews."""
        for slot_id in SLOT_ORDER:
            self.set_slot(slot_id, None)

    def get_slot(self, slot_id: Union[SlotId, str]) -> ImageSlot:
        return self._slots[_resolve_slot_id(slot_id)]

    @property
    def slot_a(self) -> ImageSlot:
        return self._slots[SlotId.A]

    @property
    def slot_b(self) -> ImageSlot:
        return self._slots[SlotId.B]

    @property
    def has_image(self) -> bool:
        return any(not slot.is_empty for slot in self._slots.values())

    def snapshot(self) -> Tuple[Optional[SourceImage], Optional[SourceImage]]:
        """The files currently in slots A and B, in that order."""
        return self.slot_a.file, self.slot_b.file

    def __enter__(self) -> 'ImageSlotManager':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.clear_all()
        self.preview_provider.close()
        return False
