"""
Teotlan Constants

Global constants used throughout the generation workflow.
"""

from enum import Enum

# =============================================================================
# VERSION INFO
# =============================================================================
VERSION = "1.0.0"
PROJECT_NAME = "Teotlan Studio"

# =============================================================================
# SLOTS
# =============================================================================

class SlotId(Enum):
    """The two independent image-input holders."""
    A = "a"
    B = "b"

# Order in which populated slots are encoded and sent
SLOT_ORDER = (SlotId.A, SlotId.B)

# =============================================================================
# USER-FACING MESSAGES
# =============================================================================

VALIDATION_MESSAGE = "Please provide a prompt and at least one image."
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."

# =============================================================================
# OUTPUT
# =============================================================================

GENERATED_MIME_TYPE = "image/png"
DATA_URI_PREFIX = f"data:{GENERATED_MIME_TYPE};base64,"
DEFAULT_DOWNLOAD_FILENAME = "teotlan-creation.png"

# =============================================================================
# MEDIA TYPES
# =============================================================================

# Suffix lookup used when a file carries no declared media type
SUFFIX_MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".gif": "image/gif",
    ".heic": "image/heic",
    ".heif": "image/heif",
}
FALLBACK_MIME_TYPE = "application/octet-stream"

# =============================================================================
# IMAGE SERVICE
# =============================================================================

class ImageProvider(Enum):
    """Supported image generation back ends."""
    GEMINI = "gemini"

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
GEMINI_IMAGE_MODEL = "gemini-2.5-flash-image-preview"
GEMINI_API_KEY_ENV = "GEMINI_API_KEY"
DEFAULT_SERVICE_TIMEOUT = 120

# Preview thumbnails
DEFAULT_THUMBNAIL_SIZE = (320, 320)
