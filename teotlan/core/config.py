"""
Teotlan Configuration Management

Centralized configuration system with JSON loading and validation.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .exceptions import ConfigurationError, InvalidConfigError
from .constants import (
    DEFAULT_DOWNLOAD_FILENAME,
    DEFAULT_SERVICE_TIMEOUT,
    DEFAULT_THUMBNAIL_SIZE,
    GEMINI_API_KEY_ENV,
    GEMINI_BASE_URL,
    GEMINI_IMAGE_MODEL,
    ImageProvider,
    PROJECT_NAME,
    VERSION,
)


@dataclass
class ServiceConfig:
    """Configuration for the external image generation service."""
    provider: ImageProvider = ImageProvider.GEMINI
    model: str = GEMINI_IMAGE_MODEL
    api_key_env: str = GEMINI_API_KEY_ENV  # Environment variable name for API key
    base_url: str = GEMINI_BASE_URL
    timeout: int = DEFAULT_SERVICE_TIMEOUT

    @classmethod
    def from_dict(cls, data: dict) -> 'ServiceConfig':
        """Create ServiceConfig from dictionary."""
        try:
            provider = ImageProvider(data.get('provider', ImageProvider.GEMINI.value))
        except ValueError:
            raise InvalidConfigError(f"Unknown image provider: {data.get('provider')}")
        return cls(
            provider=provider,
            model=data.get('model', GEMINI_IMAGE_MODEL),
            api_key_env=data.get('api_key_env', GEMINI_API_KEY_ENV),
            base_url=data.get('base_url', GEMINI_BASE_URL),
            timeout=data.get('timeout', DEFAULT_SERVICE_TIMEOUT)
        )


@dataclass
class UploadConfig:
    """Checks applied when a slot's file is encoded.

    An empty allow-list accepts every media type.
    """
    allowed_mime_types: List[str] = field(default_factory=list)
    max_image_size_mb: Optional[float] = None

    @property
    def max_image_bytes(self) -> Optional[int]:
        if self.max_image_size_mb is None:
            return None
        return int(self.max_image_size_mb * 1024 * 1024)


@dataclass
class PreviewConfig:
    """Preview thumbnail settings."""
    thumbnail_size: Tuple[int, int] = DEFAULT_THUMBNAIL_SIZE
    scratch_dir: Optional[Path] = None


@dataclass
class OutputConfig:
    """Where the generated image is written when downloaded."""
    download_filename: str = DEFAULT_DOWNLOAD_FILENAME
    output_dir: Path = field(default_factory=lambda: Path("output"))


@dataclass
class TeotlanConfig:
    """Main configuration class for Teotlan Studio."""

    project_name: str = PROJECT_NAME
    version: str = VERSION

    logs_dir: Path = field(default_factory=lambda: Path("logs"))

    # Sub-configurations
    service: ServiceConfig = field(default_factory=ServiceConfig)
    uploads: UploadConfig = field(default_factory=UploadConfig)
    previews: PreviewConfig = field(default_factory=PreviewConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    verbose_logging: bool = True

    @classmethod
    def from_dict(cls, data: dict) -> 'TeotlanConfig':
        """Create TeotlanConfig from dictionary."""
        config = cls()

        config.project_name = data.get('project_name', config.project_name)
        config.version = data.get('version', config.version)
        config.verbose_logging = data.get('verbose_logging', config.verbose_logging)

        if 'logs_dir' in data:
            config.logs_dir = Path(data['logs_dir'])

        if 'service' in data:
            config.service = ServiceConfig.from_dict(data['service'])

        if 'uploads' in data:
            upload_data = data['uploads']
            allowed = upload_data.get('allowed_mime_types', [])
            if not isinstance(allowed, list):
                raise InvalidConfigError("uploads.allowed_mime_types must be a list")
            config.uploads = UploadConfig(
                allowed_mime_types=[m.lower() for m in allowed],
                max_image_size_mb=upload_data.get('max_image_size_mb')
            )

        if 'previews' in data:
            preview_data = data['previews']
            size = preview_data.get('thumbnail_size', list(DEFAULT_THUMBNAIL_SIZE))
            if len(size) != 2:
                raise InvalidConfigError(f"previews.thumbnail_size must be [width, height], got {size}")
            scratch = preview_data.get('scratch_dir')
            config.previews = PreviewConfig(
                thumbnail_size=(int(size[0]), int(size[1])),
                scratch_dir=Path(scratch) if scratch else None
            )

        if 'output' in data:
            out_data = data['output']
            config.output = OutputConfig(
                download_filename=out_data.get('download_filename', DEFAULT_DOWNLOAD_FILENAME),
                output_dir=Path(out_data.get('output_dir', 'output'))
            )

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to a JSON-serializable dictionary."""
        return {
            'project_name': self.project_name,
            'version': self.version,
            'verbose_logging': self.verbose_logging,
            'logs_dir': str(self.logs_dir),
            'service': {
                'provider': self.service.provider.value,
                'model': self.service.model,
                'api_key_env': self.service.api_key_env,
                'base_url': self.service.base_url,
                'timeout': self.service.timeout,
            },
            'uploads': {
                'allowed_mime_types': list(self.uploads.allowed_mime_types),
                'max_image_size_mb': self.uploads.max_image_size_mb,
            },
            'previews': {
                'thumbnail_size': list(self.previews.thumbnail_size),
                'scratch_dir': str(self.previews.scratch_dir) if self.previews.scratch_dir else None,
            },
            'output': {
                'download_filename': self.output.download_filename,
                'output_dir': str(self.output.output_dir),
            },
        }


def load_config(config_path: Path = None) -> TeotlanConfig:
    """
    Load configuration from JSON file.

    Args:
        config_path: Path to configuration file. If None, uses default.

    Returns:
        Loaded TeotlanConfig instance
    """
    if config_path is None:
        config_path = Path("config/teotlan_config.json")
    config_path = Path(config_path)

    if not config_path.exists():
        return TeotlanConfig()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidConfigError(f"Invalid JSON in config file: {e}")
    except OSError as e:
        raise ConfigurationError(f"Failed to load config: {e}")

    return TeotlanConfig.from_dict(data)


def save_config(config: TeotlanConfig, config_path: Path) -> None:
    """Write configuration to a JSON file."""
    config_path = Path(config_path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(config.to_dict(), f, indent=2)


# Global config instance
_config: Optional[TeotlanConfig] = None


def get_config() -> TeotlanConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: TeotlanConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
