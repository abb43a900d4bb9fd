"""
Download artifact for a successful generation.
"""

from __future__ import annotations

import base64
import binascii
from pathlib import Path
from typing import Union

from teotlan.core.constants import DEFAULT_DOWNLOAD_FILENAME
from teotlan.core.exceptions import GenerationStateError, ServiceError
from teotlan.core.logging_config import get_logger
from teotlan.studio.outcome import GenerationOutcome

logger = get_logger("studio.artifacts")


def decode_generated_image(outcome: GenerationOutcome) -> bytes:
    """Raw PNG bytes of a succeeded outcome."""
    if not outcome.is_success:
        raise GenerationStateError(outcome.state.value, "download")
    try:
        return base64.b64decode(outcome.image_data, validate=True)
    except binascii.Error as e:
        raise ServiceError(f"Generated image is not valid base64: {e}") from e


def save_generated_image(
    outcome: GenerationOutcome,
    directory: Union[Path, str],
    filename: str = DEFAULT_DOWNLOAD_FILENAME
) -> Path:
    """
    Write the generated image to ``directory/filename``.

    Args:
        outcome: A SUCCEEDED outcome
        directory: Destination directory, created if missing
        filename: File name; ``.png`` is appended when missing

    Returns:
        Path of the written file
    """
    image_bytes = decode_generated_image(outcome)

    if not filename.lower().endswith(".png"):
        filename = f"{filename}.png"

    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    output_path = directory / filename
    output_path.write_bytes(image_bytes)

    logger.info(f"Saved generated image: {output_path}")
    return output_path
