"""
Tests for Image Encoder

Tests for teotlan/studio/encoder.py
"""

import base64
import pytest

from teotlan.core.config import UploadConfig
from teotlan.core.exceptions import EncodingError, UnsupportedMediaTypeError
from teotlan.studio.encoder import ImageEncoder, encode_image
from teotlan.studio.models import EncodedImage, SourceImage


class TestEncodeImage:
    """Tests for the default encoder."""

    @pytest.mark.asyncio
    async def test_encodes_file_bytes(self, image_a, jpeg_file):
        encoded = await encode_image(image_a)

        assert isinstance(encoded, EncodedImage)
        assert encoded.mime_type == "image/jpeg"
        assert base64.b64decode(encoded.data) == jpeg_file.read_bytes()

    @pytest.mark.asyncio
    async def test_encodes_data_uri(self):
        image = SourceImage.from_data_uri("data:image/png;base64,QUJD")

        encoded = await encode_image(image)

        assert encoded.data == "QUJD"
        assert encoded.mime_type == "image/png"

    @pytest.mark.asyncio
    async def test_accepts_any_media_type_by_default(self, temp_dir):
        path = temp_dir / "scan.tiff"
        path.write_bytes(b"II*\x00")

        encoded = await encode_image(SourceImage.from_path(path, mime_type="image/tiff"))

        assert encoded.mime_type == "image/tiff"

    @pytest.mark.asyncio
    async def test_missing_file_raises(self, temp_dir):
        image = SourceImage.from_path(temp_dir / "gone.jpg")

        with pytest.raises(EncodingError) as exc_info:
            await encode_image(image)

        assert "gone.jpg" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_malformed_data_uri_raises(self):
        image = SourceImage.from_data_uri("data:image/png;base64,%%%")

        with pytest.raises(EncodingError):
            await encode_image(image)

    @pytest.mark.asyncio
    async def test_empty_media_type_raises(self, jpeg_file):
        image = SourceImage(name="beach.jpg", mime_type="", path=jpeg_file)

        with pytest.raises(EncodingError):
            await encode_image(image)


class TestImageEncoderChecks:
    """Tests for the configurable media type and size checks."""

    @pytest.mark.asyncio
    async def test_allow_list_rejects(self, image_a):
        encoder = ImageEncoder(allowed_mime_types=["image/png"])

        with pytest.raises(UnsupportedMediaTypeError) as exc_info:
            await encoder.encode(image_a)

        assert exc_info.value.message == "Unsupported image type: 'image/jpeg'"
        assert isinstance(exc_info.value, EncodingError)

    @pytest.mark.asyncio
    async def test_allow_list_is_case_insensitive(self, image_a):
        encoder = ImageEncoder(allowed_mime_types=["IMAGE/JPEG"])

        encoded = await encoder.encode(image_a)

        assert encoded.mime_type == "image/jpeg"

    @pytest.mark.asyncio
    async def test_size_limit(self, image_a):
        encoder = ImageEncoder(max_image_bytes=5)

        with pytest.raises(EncodingError) as exc_info:
            await encoder.encode(image_a)

        assert exc_info.value.details["size"] == 10

    @pytest.mark.asyncio
    async def test_unexpected_payload_type(self, monkeypatch, image_a):
        monkeypatch.setattr(SourceImage, "read_bytes", lambda self: "not bytes")

        with pytest.raises(EncodingError) as exc_info:
            await ImageEncoder().encode(image_a)

        assert "Unexpected payload" in exc_info.value.message

    def test_from_config(self):
        encoder = ImageEncoder.from_config(
            UploadConfig(allowed_mime_types=["image/png"], max_image_size_mb=1)
        )

        assert encoder.allowed_mime_types == {"image/png"}
        assert encoder.max_image_bytes == 1024 * 1024
