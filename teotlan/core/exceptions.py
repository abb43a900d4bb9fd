"""
Teotlan Custom Exceptions

Exception classes for error handling throughout the generation workflow.
"""


class TeotlanError(Exception):
    """Base exception for all Teotlan errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================

class ConfigurationError(TeotlanError):
    """Raised when there's an issue with configuration."""
    pass


class MissingConfigError(ConfigurationError):
    """Raised when a required configuration is missing."""
    pass


class InvalidConfigError(ConfigurationError):
    """Raised when a configuration value is invalid."""
    pass


# =============================================================================
# GENERATION ERRORS
# =============================================================================

class GenerationError(TeotlanError):
    """Base exception for the submit-to-outcome workflow."""
    pass


class ValidationError(GenerationError):
    """Raised when a submission is missing its prompt or images."""
    pass


class EncodingError(GenerationError):
    """Raised when a selected file cannot be converted to base64."""
    pass


class UnsupportedMediaTypeError(EncodingError):
    """Raised when a file's media type is outside the configured allow-list."""

    def __init__(self, mime_type: str, allowed: list = None):
        message = f"Unsupported image type: '{mime_type}'"
        details = {"mime_type": mime_type}
        if allowed:
            details["allowed"] = sorted(allowed)
        super().__init__(message, details)


class ServiceError(GenerationError):
    """Raised when the external generation service fails."""

    def __init__(self, message: str, status_code: int = None, details: dict = None):
        details = dict(details or {})
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details)
        self.status_code = status_code


class ContentBlockedError(ServiceError):
    """Raised when the provider's safety filters refuse the request."""

    def __init__(self, provider: str, reason: str):
        message = f"Content blocked by {provider}: {reason}"
        super().__init__(message, details={"provider": provider, "reason": reason})
        self.is_content_block = True


class GenerationStateError(GenerationError):
    """Raised on an illegal outcome transition or a missing result."""

    def __init__(self, current: str, requested: str):
        message = f"Cannot move outcome from '{current}' to '{requested}'"
        super().__init__(message, {"current": current, "requested": requested})
