"""
Generation Orchestrator

Owns the submit-to-outcome state machine. A submission is validated, its
populated slots are encoded in order (A, then B), the image service is called
exactly once, and exactly one terminal outcome is committed.

Only one submission may be in flight; a submit that arrives while one is
running is ignored and the in-flight outcome is returned unchanged.
A cancelled submission still commits a FAILED outcome before the
cancellation propagates.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Awaitable, Callable, List, Optional

from teotlan.core.constants import UNEXPECTED_ERROR_MESSAGE, VALIDATION_MESSAGE
from teotlan.core.exceptions import ServiceError, TeotlanError, ValidationError
from teotlan.core.logging_config import get_logger
from teotlan.studio.encoder import encode_image
from teotlan.studio.models import EncodedImage, GenerationRequest, SourceImage
from teotlan.studio.outcome import GenerationOutcome, transition

if TYPE_CHECKING:
    from teotlan.llm.image_service import ImageGenerationService
    from teotlan.studio.slots import ImageSlotManager

logger = get_logger("studio.orchestrator")

Encoder = Callable[[SourceImage], Awaitable[EncodedImage]]
OutcomeCallback = Callable[[GenerationOutcome], None]


def error_message(error: BaseException) -> str:
    """The user-facing text for a failed submission."""
    if isinstance(error, TeotlanError):
        message = error.message
    else:
        message = str(error)
    return message.strip() or UNEXPECTED_ERROR_MESSAGE


class GenerationOrchestrator:
    """
    Drives one generation per submit.

    Usage:
        orchestrator = GenerationOrchestrator(GeminiImageService())
        outcome = await orchestrator.submit("sunset beach", slot_a, None)
        if outcome.is_success:
            show(outcome.data_uri)
    """

    def __init__(
        self,
        service: "ImageGenerationService",
        encoder: Optional[Encoder] = None
    ):
        """
        Args:
            service: The external image generation service
            encoder: Coroutine function turning a SourceImage into an EncodedImage
        """
        self.service = service
        self.encoder = encoder or encode_image
        self._outcome = GenerationOutcome.idle()
        self._callbacks: List[OutcomeCallback] = []
        self.last_request: Optional[GenerationRequest] = None

    @property
    def outcome(self) -> GenerationOutcome:
        return self._outcome

    @property
    def is_busy(self) -> bool:
        return self._outcome.is_in_flight

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------

    def register_callback(self, callback: OutcomeCallback) -> None:
        """Register a callback invoked with every committed outcome."""
        if callback not in self._callbacks:
            self._callbacks.append(callback)
            logger.debug(f"Registered outcome callback: {callback}")

    def unregister_callback(self, callback: OutcomeCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def _notify_callbacks(self, outcome: GenerationOutcome) -> None:
        for callback in self._callbacks:
            try:
                callback(outcome)
            except Exception as e:
                logger.warning(f"Callback error: {e}")

    def _commit(self, target: GenerationOutcome) -> GenerationOutcome:
        self._outcome = transition(self._outcome, target)
        logger.info(f"Outcome -> {self._outcome}")
        self._notify_callbacks(self._outcome)
        return self._outcome

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    @staticmethod
    def can_submit(
        prompt: str,
        slot_a: Optional[SourceImage],
        slot_b: Optional[SourceImage]
    ) -> bool:
        """True when the prompt is non-empty and at least one image is present."""
        return bool(prompt) and (slot_a is not None or slot_b is not None)

    def _validate(
        self,
        prompt: str,
        slot_a: Optional[SourceImage],
        slot_b: Optional[SourceImage]
    ) -> None:
        if not self.can_submit(prompt, slot_a, slot_b):
            raise ValidationError(VALIDATION_MESSAGE)

    async def _build_request(
        self,
        prompt: str,
        slot_a: Optional[SourceImage],
        slot_b: Optional[SourceImage]
    ) -> GenerationRequest:
        images = []
        for image in (slot_a, slot_b):
            if image is not None:
                images.append(await self.encoder(image))
        return GenerationRequest(prompt=prompt, images=tuple(images))

    async def submit(
        self,
        prompt: str,
        slot_a: Optional[SourceImage],
        slot_b: Optional[SourceImage]
    ) -> GenerationOutcome:
        """
        Run one submission to a terminal outcome.

        Args:
            prompt: Prompt text as entered
            slot_a: Image in slot A, or None
            slot_b: Image in slot B, or None

        Returns:
            The committed outcome, or the current in-flight outcome if a
            submission is already running
        """
        if self.is_busy:
            logger.warning("Submission ignored: a generation is already in flight")
            return self._outcome

        try:
            self._validate(prompt, slot_a, slot_b)
        except ValidationError as e:
            logger.info(f"Submission rejected: {e.message}")
            return self._commit(GenerationOutcome.failed(e.message))

        self._commit(GenerationOutcome.in_flight())

        try:
            request = await self._build_request(prompt, slot_a, slot_b)
            self.last_request = request
            logger.info(f"Dispatching generation with {len(request.images)} image(s)")
            image_data = await self.service.generate_image(request.prompt, request.images)
            if not isinstance(image_data, str) or not image_data:
                raise ServiceError("No image in response")
        except asyncio.CancelledError:
            logger.warning("Image generation cancelled while in flight")
            self._commit(GenerationOutcome.failed(UNEXPECTED_ERROR_MESSAGE))
            raise
        except Exception as e:
            logger.error(f"Image generation failed: {e}")
            return self._commit(GenerationOutcome.failed(error_message(e)))

        return self._commit(GenerationOutcome.succeeded(image_data))

    async def submit_slots(self, prompt: str, slots: "ImageSlotManager") -> GenerationOutcome:
        """Snapshot a slot manager's files and submit them."""
        slot_a, slot_b = slots.snapshot()
        return await self.submit(prompt, slot_a, slot_b)
