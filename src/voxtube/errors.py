"""Custom VoxTube exceptions."""


class VoxTubeError(Exception):
    """Base exception for VoxTube errors."""

    def __init__(
        self, message: str, original_error: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_error = original_error


class ConfigError(VoxTubeError):
    """Exception raised for invalid configuration values."""

    pass


class TranscriptError(VoxTubeError):
    """Exception raised when a transcript cannot be fetched.

    This typically occurs when:
    - The URL or video ID is not a valid YouTube reference
    - The transcript CLI exits non-zero or is not installed
    - The video has no transcript, or it exceeds the length limit
    """

    pass


class SummarizerError(VoxTubeError):
    """Exception raised when the LLM provider fails to produce a summary."""

    pass


class TTSError(VoxTubeError):
    """Base exception for speech synthesis errors."""

    pass


class TTSAPIError(TTSError):
    """Exception raised for TTS server communication errors.

    This typically occurs when:
    - The Kokoro server is not running (connection refused)
    - The server answers with a 4xx/5xx status
    - The request times out
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.status_code = status_code
