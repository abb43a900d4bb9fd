"""
Studio Data Models

Value types passed between the slot manager, the encoder, the orchestrator
and the image service.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from teotlan.core.constants import FALLBACK_MIME_TYPE, SUFFIX_MIME_TYPES
from teotlan.core.exceptions import EncodingError


def guess_mime_type(path: Path) -> str:
    """Guess a media type from the file suffix."""
    return SUFFIX_MIME_TYPES.get(Path(path).suffix.lower(), FALLBACK_MIME_TYPE)


def parse_data_uri(uri: str) -> Tuple[str, bytes]:
    """Split a ``data:<mime>;base64,<payload>`` URI into media type and bytes.

    Raises:
        EncodingError: If the URI is not a base64 data URI
    """
    if not uri.startswith("data:") or "," not in uri:
        raise EncodingError("Image payload is not a data URI")

    header, payload = uri[5:].split(",", 1)
    if not header.endswith(";base64"):
        raise EncodingError("Image data URI is not base64 encoded", {"header": header})

    try:
        content = base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise EncodingError(f"Image data URI has an invalid base64 payload: {e}")

    return header[:-len(";base64")], content


@dataclass(frozen=True)
class SourceImage:
    """A user-selected image: either a file on disk or an in-memory data URI."""
    name: str
    mime_type: str
    path: Optional[Path] = None
    data_uri: Optional[str] = field(default=None, repr=False)

    @classmethod
    def from_path(cls, path: Union[Path, str], mime_type: str = None) -> 'SourceImage':
        """Create a SourceImage for a file, guessing the media type if not given."""
        path = Path(path)
        return cls(
            name=path.name,
            mime_type=mime_type or guess_mime_type(path),
            path=path
        )

    @classmethod
    def from_data_uri(cls, uri: str, name: str = "upload") -> 'SourceImage':
        """Create a SourceImage from a data URI.

        The payload is only decoded when the image is read, so a malformed
        URI surfaces as an EncodingError at encode time.
        """
        mime_type = ""
        if uri.startswith("data:"):
            mime_type = uri[5:].split(",", 1)[0].split(";", 1)[0]
        return cls(name=name, mime_type=mime_type, data_uri=uri)

    def read_bytes(self) -> bytes:
        """Read the full image content. Blocking."""
        if self.data_uri is not None:
            _, content = parse_data_uri(self.data_uri)
            return content
        if self.path is None:
            raise EncodingError(f"Image '{self.name}' has no content source")
        return self.path.read_bytes()


@dataclass(frozen=True)
class EncodedImage:
    """Base64 payload of one slot's image plus its declared media type."""
    data: str
    mime_type: str

    def to_dict(self) -> Dict[str, str]:
        return {"data": self.data, "mimeType": self.mime_type}


@dataclass(frozen=True)
class GenerationRequest:
    """Prompt plus 0-2 encoded images, slot A before slot B."""
    prompt: str
    images: Tuple[EncodedImage, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "prompt": self.prompt,
            "images": [image.to_dict() for image in self.images],
        }
