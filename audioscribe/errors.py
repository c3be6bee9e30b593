"""Error taxonomy for the capture, transcription and derivation pipeline."""

from typing import Optional


class AudioscribeError(Exception):
    """Base class for all pipeline errors.

    Every error names the stage that failed so callers can surface a
    message like "transcription: Deepgram returned 401".
    """

    stage = "pipeline"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message

    def user_message(self) -> str:
        """Human-readable message that identifies the failing stage."""
        return f"[{self.stage}] {self.message}"


# Capture

class CaptureError(AudioscribeError):
    stage = "capture"


class PermissionDenied(CaptureError):
    """Microphone access was refused."""


class DeviceUnavailable(CaptureError):
    """No usable input device, or the device went away mid-recording."""


class AudioTooShort(CaptureError):
    """Recorded payload is below the minimum byte size."""

    def __init__(self, size_bytes: int, min_bytes: int):
        super().__init__(
            f"Recording too short: {size_bytes} bytes (minimum {min_bytes} bytes)"
        )
        self.size_bytes = size_bytes
        self.min_bytes = min_bytes


# Encoding

class EncodingError(AudioscribeError):
    stage = "encoding"


# Transcription

class InvalidInput(AudioscribeError):
    """Caller passed input that cannot be sent to a remote service."""

    def __init__(self, message: str, stage: str = "transcription"):
        super().__init__(message)
        self.stage = stage


class EmptyTranscript(AudioscribeError):
    """Speech service answered but returned no usable text."""

    stage = "transcription"


class TranscriptionError(AudioscribeError):
    """Speech service failed: non-success status, network error or timeout."""

    stage = "transcription"

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


# Derivation

class NoTranscriptAvailable(AudioscribeError):
    stage = "derivation"

    def __init__(self, message: str = "No transcript available; transcribe audio first"):
        super().__init__(message)


class DerivationError(AudioscribeError):
    """Translation or summarization failed."""

    stage = "derivation"


class LLMServiceError(AudioscribeError):
    """Language-model endpoint failed."""

    stage = "llm"

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status
