"""
Image Generation Service

Client side of the external multimodal image model. The orchestrator only
depends on ``ImageGenerationService.generate_image``; ``GeminiImageService``
is the production implementation.

Gemini request shape (generateContent):
    contents[0].parts = [{"text": prompt}, {"inline_data": {...}}, ...]
    generationConfig.responseModalities = ["IMAGE", "TEXT"]

The generated image comes back as base64 in
``candidates[0].content.parts[*].inlineData.data``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Sequence

import httpx

from teotlan.core.config import ServiceConfig
from teotlan.core.constants import (
    DEFAULT_SERVICE_TIMEOUT,
    GEMINI_BASE_URL,
    GEMINI_IMAGE_MODEL,
    ImageProvider,
)
from teotlan.core.env_loader import get_gemini_api_key
from teotlan.core.exceptions import (
    ContentBlockedError,
    InvalidConfigError,
    MissingConfigError,
    ServiceError,
)
from teotlan.core.logging_config import get_logger
from teotlan.studio.models import EncodedImage

logger = get_logger("llm.image_service")

# finishReason values Gemini uses when it withholds an image
BLOCKED_FINISH_REASONS = {"SAFETY", "IMAGE_SAFETY", "PROHIBITED_CONTENT", "BLOCKLIST", "RECITATION"}


class ImageGenerationService(ABC):
    """Generates one image from a prompt and up to two reference images."""

    display_name = "Image service"

    @abstractmethod
    async def generate_image(self, prompt: str, images: Sequence[EncodedImage]) -> str:
        """
        Generate an image.

        Args:
            prompt: User prompt
            images: Encoded reference images, slot A before slot B

        Returns:
            Base64-encoded PNG

        Raises:
            ServiceError: If the provider fails or returns no image
        """
        pass


class GeminiImageService(ImageGenerationService):
    """Gemini image model (Nano Banana) over the REST API."""

    display_name = "Gemini"

    def __init__(
        self,
        api_key: str = None,
        model: str = GEMINI_IMAGE_MODEL,
        base_url: str = GEMINI_BASE_URL,
        timeout: float = DEFAULT_SERVICE_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        api_key = api_key or get_gemini_api_key()
        if not api_key:
            raise MissingConfigError("GeminiImageService requires an API key (GEMINI_API_KEY)")
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_config(
        cls,
        config: ServiceConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> 'GeminiImageService':
        return cls(
            api_key=get_gemini_api_key(config.api_key_env),
            model=config.model,
            base_url=config.base_url,
            timeout=config.timeout,
            transport=transport
        )

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.model}:generateContent"

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key
        }

    def _build_body(self, prompt: str, images: Sequence[EncodedImage]) -> Dict[str, Any]:
        parts = [{"text": prompt}]
        for image in images:
            parts.append({"inline_data": {"mime_type": image.mime_type, "data": image.data}})
        return {
            "contents": [{"parts": parts}],
            "generationConfig": {"responseModalities": ["IMAGE", "TEXT"]}
        }

    async def generate_image(self, prompt: str, images: Sequence[EncodedImage]) -> str:
        body = self._build_body(prompt, images)
        logger.info(f"Requesting image from {self.model} with {len(images)} reference image(s)")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.url, json=body, headers=self._get_headers())
        except httpx.TimeoutException as e:
            raise ServiceError(f"Image request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise ServiceError(f"Image request failed: {e}") from e

        if response.is_error:
            raise ServiceError(self._error_message(response), status_code=response.status_code)

        try:
            result = response.json()
        except ValueError as e:
            raise ServiceError("Image service returned a malformed response") from e
        if not isinstance(result, dict):
            raise ServiceError("Image service returned a malformed response")

        return self._extract_image(result)

    def _error_message(self, response: httpx.Response) -> str:
        """Prefer the provider's own error text over the bare status line."""
        try:
            data = response.json()
            error = data.get("error") if isinstance(data, dict) else None
            if isinstance(error, dict) and error.get("message"):
                return error["message"]
        except ValueError:
            pass
        text = response.text.strip()
        if text:
            return f"HTTP {response.status_code}: {text[:300]}"
        return f"HTTP {response.status_code}"

    def _extract_image(self, result: Dict[str, Any]) -> str:
        feedback = result.get("promptFeedback") or {}
        if feedback.get("blockReason"):
            raise ContentBlockedError(self.display_name, feedback["blockReason"])

        candidates = result.get("candidates") or []
        if not candidates:
            raise ServiceError("No image in response")

        candidate = candidates[0]
        text = ""
        for part in (candidate.get("content") or {}).get("parts", []):
            inline = part.get("inlineData") or part.get("inline_data")
            if inline and inline.get("data"):
                return inline["data"]
            if "text" in part:
                text += part["text"]

        finish_reason = candidate.get("finishReason")
        if finish_reason in BLOCKED_FINISH_REASONS:
            raise ContentBlockedError(self.display_name, finish_reason)

        if text.strip():
            raise ServiceError(f"No image in response: {text.strip()}")
        raise ServiceError("No image in response")


def create_image_service(
    config: ServiceConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> ImageGenerationService:
    """Build the image service named by the config."""
    if config.provider == ImageProvider.GEMINI:
        return GeminiImageService.from_config(config, transport=transport)
    raise InvalidConfigError(f"Unsupported image provider: {config.provider}")
