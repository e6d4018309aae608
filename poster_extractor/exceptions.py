"""
Exception hierarchy for the poster metadata extractor.

Messages of the extraction and refresh errors are shown to the user as-is,
so they are kept in Indonesian like the rest of the interface.
"""


class PosterExtractorError(Exception):
    """Base exception for the poster metadata extractor."""


class ConfigurationError(PosterExtractorError):
    """Raised when required configuration (the API key) is missing."""


class ImageEncodingError(PosterExtractorError):
    """Raised when an uploaded image cannot be read or encoded."""


class ExtractionError(PosterExtractorError):
    """Base class for full-poster extraction failures."""


class ExtractionFailedError(ExtractionError):
    """Raised when the model returns no usable content."""

    def __init__(self, message: str = "Gagal mengekstrak data dari AI."):
        super().__init__(message)


class MalformedResponseError(ExtractionError):
    """Raised when the model response is not valid metadata JSON."""

    def __init__(self, message: str = "Format respon AI tidak valid."):
        super().__init__(message)


class UnknownFieldError(PosterExtractorError, KeyError):
    """Raised for a field key that is not part of PosterMetadata."""

    def __str__(self) -> str:
        return f"Unknown metadata field: {self.args[0]}" if self.args else "Unknown metadata field"


class FieldRefreshError(PosterExtractorError):
    """Raised when re-analysing a single field fails."""

    def __init__(self, message: str = "Gagal memperbarui data. Silakan coba lagi."):
        super().__init__(message)


class RefreshInProgressError(PosterExtractorError):
    """Raised when a field refresh is requested while one is still running."""
