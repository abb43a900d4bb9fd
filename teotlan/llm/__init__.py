"""
Teotlan LLM Module

Clients for the external image generation service.
"""

from .image_service import (
    ImageGenerationService,
    GeminiImageService,
    create_image_service,
)

__all__ = [
    'ImageGenerationService',
    'GeminiImageService',
    'create_image_service',
]
