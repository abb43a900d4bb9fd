"""
Startup validation and environment checks.

Validates the image service API key at application startup.
"""

from dataclasses import dataclass, field
from typing import List

from .config import TeotlanConfig
from .env_loader import get_gemini_api_key


@dataclass
class ValidationResult:
    """Result of environment validation."""
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def validate_environment(config: TeotlanConfig) -> ValidationResult:
    """
    Validate the environment configuration.

    Checks:
    - The configured image service has an API key
    - Upload limits are sensible (warnings only)

    Returns:
        ValidationResult with validation status and any errors/warnings
    """
    errors = []
    warnings = []

    key_env = config.service.api_key_env
    api_key = get_gemini_api_key(key_env)
    if not api_key or not api_key.strip():
        errors.append(
            f"No image service API key found. Set {key_env} (or GOOGLE_API_KEY)."
        )

    max_mb = config.uploads.max_image_size_mb
    if max_mb is not None and max_mb <= 0:
        warnings.append(f"uploads.max_image_size_mb is {max_mb}; every image will be rejected")

    if not config.uploads.allowed_mime_types:
        warnings.append("No media type allow-list configured - any file type is accepted")

    return ValidationResult(
        valid=len(errors) == 0,
        errors=errors,
        warnings=warnings
    )
