"""
Tests for Preview Providers

Tests for teotlan/studio/previews.py
"""

from PIL import Image

from teotlan.core.config import PreviewConfig
from teotlan.studio.models import SourceImage
from teotlan.studio.previews import NullPreviewProvider, ThumbnailPreviewProvider


class TestThumbnailPreviewProvider:
    """Tests for Pillow-backed previews."""

    def test_acquire_writes_thumbnail(self, temp_dir, image_b):
        provider = ThumbnailPreviewProvider(scratch_dir=temp_dir / "previews", size=(64, 64))

        handle = provider.acquire(image_b)

        assert handle.owned is True
        assert handle.location.exists()
        assert handle.location.parent == temp_dir / "previews"
        with Image.open(handle.location) as img:
            assert img.format == "PNG"

    def test_release_deletes_thumbnail(self, temp_dir, image_b):
        provider = ThumbnailPreviewProvider(scratch_dir=temp_dir)
        handle = provider.acquire(image_b)

        provider.release(handle)

        assert handle.released is True
        assert not handle.location.exists()

    def test_double_release_is_noop(self, temp_dir, image_b):
        provider = ThumbnailPreviewProvider(scratch_dir=temp_dir)
        handle = provider.acquire(image_b)

        provider.release(handle)
        provider.release(handle)

        assert handle.released is True

    def test_undecodable_image_falls_back_to_source(self, temp_dir, image_a, jpeg_file):
        provider = ThumbnailPreviewProvider(scratch_dir=temp_dir / "previews")

        handle = provider.acquire(image_a)

        assert handle.owned is False
        assert handle.location == jpeg_file

        provider.release(handle)
        assert jpeg_file.exists()

    def test_data_uri_image(self, temp_dir, png_file):
        import base64
        uri = "data:image/png;base64," + base64.b64encode(png_file.read_bytes()).decode()
        provider = ThumbnailPreviewProvider(scratch_dir=temp_dir / "previews")

        handle = provider.acquire(SourceImage.from_data_uri(uri))

        assert handle.owned is True
        assert handle.location.exists()

    def test_close_removes_own_scratch_dir(self, image_b):
        provider = ThumbnailPreviewProvider()
        scratch = provider.scratch_dir
        provider.acquire(image_b)

        provider.close()

        assert not scratch.exists()

    def test_close_keeps_caller_scratch_dir(self, temp_dir):
        provider = ThumbnailPreviewProvider(scratch_dir=temp_dir)

        provider.close()

        assert temp_dir.exists()


class TestNullPreviewProvider:
    """Tests for resource-free previews."""

    def test_handles_are_unique(self, image_a):
        provider = NullPreviewProvider()

        first = provider.acquire(image_a)
        second = provider.acquire(image_a)

        assert first.handle_id != second.handle_id
        assert first.location == image_a.path

    def test_release_marks_released(self, image_a):
        provider = NullPreviewProvider()
        handle = provider.acquire(image_a)

        provider.release(handle)

        assert handle.released is True


class TestPreviewsFromConfig:
    """Tests for building the thumbnail provider from config."""

    def test_from_config(self, temp_dir, image_b):
        provider = ThumbnailPreviewProvider.from_config(
            PreviewConfig(thumbnail_size=(128, 96), scratch_dir=temp_dir / "thumbs")
        )

        handle = provider.acquire(image_b)

        assert provider.size == (128, 96)
        assert handle.location.parent == temp_dir / "thumbs"

    def test_from_default_config_uses_temp_dir(self):
        provider = ThumbnailPreviewProvider.from_config(PreviewConfig())

        assert provider.scratch_dir.exists()
        provider.close()
        assert not provider.scratch_dir.exists()
