"""
Teotlan Studio - Reference-Guided AI Image Generation

Combine up to two reference images with a text prompt and let a multimodal
image model produce a single new image.

Version: 1.0.0
"""

__version__ = "1.0.0"
__author__ = "Teotlan Studio Team"
__project__ = "Teotlan Studio"

from pathlib import Path

# Load environment variables early - before any service client needs them
from teotlan.core.env_loader import ensure_env_loaded
ensure_env_loaded()

# Package root directory
PACKAGE_ROOT = Path(__file__).parent
PROJECT_ROOT = PACKAGE_ROOT.parent

__all__ = [
    "__version__",
    "__author__",
    "__project__",
    "PACKAGE_ROOT",
    "PROJECT_ROOT",
]
