"""
Tests for Teotlan Configuration

Tests for teotlan/core/config.py
"""

import json
import pytest
from pathlib import Path

from teotlan.core import config as config_module
from teotlan.core.config import (
    TeotlanConfig,
    ServiceConfig,
    UploadConfig,
    get_config,
    load_config,
    save_config,
    set_config,
)
from teotlan.core.constants import GEMINI_IMAGE_MODEL, ImageProvider
from teotlan.core.exceptions import ConfigurationError, InvalidConfigError


class TestServiceConfig:
    """Tests for ServiceConfig."""

    def test_defaults(self):
        config = ServiceConfig()

        assert config.provider == ImageProvider.GEMINI
        assert config.model == GEMINI_IMAGE_MODEL
        assert config.api_key_env == "GEMINI_API_KEY"
        assert config.timeout == 120

    def test_from_dict(self):
        config = ServiceConfig.from_dict({"model": "other-model", "timeout": 10})

        assert config.model == "other-model"
        assert config.timeout == 10
        assert config.provider == ImageProvider.GEMINI

    def test_unknown_provider(self):
        with pytest.raises(InvalidConfigError):
            ServiceConfig.from_dict({"provider": "dalle"})


class TestUploadConfig:
    """Tests for UploadConfig."""

    def test_defaults_accept_everything(self):
        config = UploadConfig()

        assert config.allowed_mime_types == []
        assert config.max_image_bytes is None

    def test_max_image_bytes(self):
        assert UploadConfig(max_image_size_mb=2).max_image_bytes == 2 * 1024 * 1024


class TestTeotlanConfig:
    """Tests for TeotlanConfig class."""

    def test_default_config(self):
        config = TeotlanConfig()

        assert config.project_name == "Teotlan Studio"
        assert config.output.download_filename == "teotlan-creation.png"
        assert config.output.output_dir == Path("output")
        assert config.previews.thumbnail_size == (320, 320)

    def test_from_dict(self, sample_config):
        config = TeotlanConfig.from_dict(sample_config)

        assert config.service.api_key_env == "TEST_GEMINI_KEY"
        assert config.service.timeout == 30
        assert config.uploads.allowed_mime_types == ["image/png", "image/jpeg"]
        assert config.uploads.max_image_size_mb == 5
        assert config.previews.thumbnail_size == (128, 96)
        assert config.output.download_filename == "my-creation.png"
        assert config.output.output_dir == Path("renders")

    def test_from_dict_partial(self):
        config = TeotlanConfig.from_dict({"verbose_logging": False})

        assert config.verbose_logging is False
        assert config.service.model == GEMINI_IMAGE_MODEL

    def test_allow_list_must_be_list(self):
        with pytest.raises(InvalidConfigError):
            TeotlanConfig.from_dict({"uploads": {"allowed_mime_types": "image/png"}})

    def test_thumbnail_size_must_be_pair(self):
        with pytest.raises(InvalidConfigError):
            TeotlanConfig.from_dict({"previews": {"thumbnail_size": [64]}})

    def test_to_dict_is_json_serializable(self, sample_config):
        data = TeotlanConfig.from_dict(sample_config).to_dict()

        restored = TeotlanConfig.from_dict(json.loads(json.dumps(data)))
        assert restored.to_dict() == data


class TestLoadConfig:
    """Tests for loading configuration files."""

    def test_missing_file_returns_defaults(self, temp_dir):
        config = load_config(temp_dir / "missing.json")

        assert isinstance(config, TeotlanConfig)
        assert config.service.model == GEMINI_IMAGE_MODEL

    def test_load_from_file(self, temp_dir, sample_config):
        path = temp_dir / "teotlan_config.json"
        path.write_text(json.dumps(sample_config), encoding="utf-8")

        config = load_config(path)

        assert config.output.download_filename == "my-creation.png"

    def test_invalid_json(self, temp_dir):
        path = temp_dir / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(InvalidConfigError):
            load_config(path)

    def test_unreadable_path(self, temp_dir):
        with pytest.raises(ConfigurationError):
            load_config(temp_dir)

    def test_save_then_load(self, temp_dir, sample_config):
        path = temp_dir / "nested" / "config.json"
        original = TeotlanConfig.from_dict(sample_config)

        save_config(original, path)

        assert load_config(path).to_dict() == original.to_dict()


class TestGlobalConfig:
    """Tests for the process-wide config instance."""

    def test_set_and_get(self, monkeypatch):
        monkeypatch.setattr(config_module, "_config", None)
        custom = TeotlanConfig(project_name="Custom")

        set_config(custom)

        assert get_config() is custom

    def test_get_loads_once(self, monkeypatch):
        monkeypatch.setattr(config_module, "_config", None)

        first = get_config()

        assert get_config() is first
