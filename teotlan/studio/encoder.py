"""
Image Encoder

Converts a selected image into a base64 payload for the image service.
File reads run in a worker thread so the event loop is never blocked.
"""

from __future__ import annotations

import asyncio
import base64
from typing import Iterable, Optional

from teotlan.core.config import UploadConfig
from teotlan.core.exceptions import EncodingError, UnsupportedMediaTypeError
from teotlan.core.logging_config import get_logger
from teotlan.studio.models import EncodedImage, SourceImage

logger = get_logger("studio.encoder")


class ImageEncoder:
    """
    Reads an image and returns its base64 encoding.

    Media type and size checks are optional; with no allow-list every
    media type is accepted and the service decides what it can use.

    Usage:
        encoder = ImageEncoder(allowed_mime_types=["image/png", "image/jpeg"])
        encoded = await encoder.encode(SourceImage.from_path("cat.jpg"))
    """

    def __init__(
        self,
        allowed_mime_types: Optional[Iterable[str]] = None,
        max_image_bytes: Optional[int] = None
    ):
        self.allowed_mime_types = {m.lower() for m in allowed_mime_types or ()}
        self.max_image_bytes = max_image_bytes

    @classmethod
    def from_config(cls, uploads: UploadConfig) -> 'ImageEncoder':
        """Build an encoder from the uploads section of the config."""
        return cls(
            allowed_mime_types=uploads.allowed_mime_types,
            max_image_bytes=uploads.max_image_bytes
        )

    def _check_media_type(self, image: SourceImage) -> None:
        if not image.mime_type:
            raise EncodingError(
                f"Image '{image.name}' has no media type",
                {"name": image.name}
            )
        if self.allowed_mime_types and image.mime_type.lower() not in self.allowed_mime_types:
            raise UnsupportedMediaTypeError(image.mime_type, list(self.allowed_mime_types))

    async def encode(self, image: SourceImage) -> EncodedImage:
        """
        Encode one image.

        Args:
            image: The image selected into a slot

        Returns:
            EncodedImage carrying the base64 data and the image's media type

        Raises:
            EncodingError: If the read fails or yields something other than bytes
        """
        self._check_media_type(image)

        try:
            content = await asyncio.to_thread(image.read_bytes)
        except OSError as e:
            raise EncodingError(
                f"Could not read image '{image.name}': {e.strerror or e}",
                {"name": image.name}
            ) from e

        if not isinstance(content, (bytes, bytearray)):
            raise EncodingError(
                f"Unexpected payload for image '{image.name}': {type(content).__name__}",
                {"name": image.name}
            )

        if self.max_image_bytes is not None and len(content) > self.max_image_bytes:
            raise EncodingError(
                f"Image '{image.name}' is {len(content)} bytes, limit is {self.max_image_bytes}",
                {"name": image.name, "size": len(content), "limit": self.max_image_bytes}
            )

        data = base64.b64encode(content).decode("ascii")
        logger.debug(f"Encoded {image.name} ({image.mime_type}, {len(content)} bytes)")
        return EncodedImage(data=data, mime_type=image.mime_type)


_default_encoder = ImageEncoder()


async def encode_image(image: SourceImage) -> EncodedImage:
    """Encode an image with no media type or size restrictions."""
    return await _default_encoder.encode(image)
