"""
Pytest Configuration and Fixtures

Shared fixtures for all tests.
"""

import base64
import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Dict, Any, List
from unittest.mock import AsyncMock

from teotlan.studio.models import SourceImage
from teotlan.studio.previews import PreviewHandle, PreviewProvider


# 10-byte JPEG stub: SOI marker, APP0 marker, then filler
JPEG_STUB = b"\xff\xd8\xff\xe0\x00\x10JFIF"

# 1x1 transparent PNG
PNG_1X1 = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


class TrackingPreviewProvider(PreviewProvider):
    """Preview provider that records every acquire and dispose."""

    def __init__(self):
        self.acquired: List[PreviewHandle] = []
        self.disposed: List[PreviewHandle] = []
        self._next_id = 0

    def acquire(self, image: SourceImage) -> PreviewHandle:
        self._next_id += 1
        handle = PreviewHandle(handle_id=self._next_id, image=image)
        self.acquired.append(handle)
        return handle

    def _dispose(self, handle: PreviewHandle) -> None:
        self.disposed.append(handle)

    @property
    def live(self) -> List[PreviewHandle]:
        return [h for h in self.acquired if not h.released]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def jpeg_file(temp_dir) -> Path:
    """A 10-byte JPEG stub on disk."""
    path = temp_dir / "beach.jpg"
    path.write_bytes(JPEG_STUB)
    return path


@pytest.fixture
def png_file(temp_dir) -> Path:
    """A decodable 1x1 PNG on disk."""
    path = temp_dir / "pixel.png"
    path.write_bytes(PNG_1X1)
    return path


@pytest.fixture
def image_a(jpeg_file) -> SourceImage:
    return SourceImage.from_path(jpeg_file)


@pytest.fixture
def image_b(png_file) -> SourceImage:
    return SourceImage.from_path(png_file)


@pytest.fixture
def tracking_previews() -> TrackingPreviewProvider:
    return TrackingPreviewProvider()


@pytest.fixture
def mock_service():
    """Image service spy returning the base64 string 'QUJD'."""
    service = AsyncMock()
    service.generate_image = AsyncMock(return_value="QUJD")
    return service


@pytest.fixture
def sample_config() -> Dict[str, Any]:
    """Sample configuration for testing."""
    return {
        "project_name": "Teotlan Studio",
        "version": "1.0.0",
        "service": {
            "provider": "gemini",
            "model": "gemini-2.5-flash-image-preview",
            "api_key_env": "TEST_GEMINI_KEY",
            "timeout": 30
        },
        "uploads": {
            "allowed_mime_types": ["image/PNG", "image/jpeg"],
            "max_image_size_mb": 5
        },
        "previews": {
            "thumbnail_size": [128, 96]
        },
        "output": {
            "download_filename": "my-creation.png",
            "output_dir": "renders"
        }
    }
