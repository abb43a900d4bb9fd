"""
Teotlan Studio Module

The generation workflow: image slots, encoding, the outcome state machine
and the orchestrator that ties them together.
"""

from .models import SourceImage, EncodedImage, GenerationRequest, parse_data_uri
from .encoder import ImageEncoder, encode_image
from .previews import PreviewHandle, PreviewProvider, NullPreviewProvider, ThumbnailPreviewProvider
from .slots import ImageSlot, ImageSlotManager
from .outcome import GenerationOutcome, OutcomeState, transition
from .orchestrator import GenerationOrchestrator, error_message
from .artifacts import save_generated_image, decode_generated_image

__all__ = [
    'SourceImage',
    'EncodedImage',
    'GenerationRequest',
    'parse_data_uri',
    'ImageEncoder',
    'encode_image',
    'PreviewHandle',
    'PreviewProvider',
    'NullPreviewProvider',
    'ThumbnailPreviewProvider',
    'ImageSlot',
    'ImageSlotManager',
    'GenerationOutcome',
    'OutcomeState',
    'transition',
    'GenerationOrchestrator',
    'error_message',
    'save_generated_image',
    'decode_generated_image',
]
