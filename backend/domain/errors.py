"""Exceptions raised across the diarization service."""


class DiarizerError(Exception):
    """Base class for service errors."""


class AudioDecodeError(DiarizerError):
    """Audio could not be converted or read as PCM."""


class AudioTooLargeError(DiarizerError, ValueError):
    """Decoded PCM would exceed the configured in-memory ceiling."""

    def __init__(self, size_mb: float, limit_mb: float):
        self.size_mb = size_mb
        self.limit_mb = limit_mb
        super().__init__(
            f"Audio too large for in-memory processing: {size_mb:.2f}MB "
            f"(limit {limit_mb:.0f}MB). Consider using smaller audio segments."
        )
