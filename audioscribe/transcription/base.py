"""Abstract base classes for transcription backends."""

from abc import ABC, abstractmethod
import logging

from ..models.transcription import TranscriptionResult

logger = logging.getLogger(__name__)


class AbstractTranscriptionBackend(ABC):
    """Abstract base class for transcription backends."""

    service_name = "unknown"

    def __init__(self, timeout_seconds: float = 60.0):
        """Initialize backend with its per-request timeout."""
        self.timeout_seconds = timeout_seconds

    @abstractmethod
    async def transcribe(self,
                         audio_data: bytes,
                         language: str,
                         mime_type: str = "audio/l16",
                         sample_rate: int = 16000,
                         channels: int = 1) -> TranscriptionResult:
        """Send audio to the speech service and return the top alternative.

        Requests are made with punctuation enabled and speaker diarization
        disabled. Exactly one remote request is issued; nothing is retried.

        Args:
            audio_data: Raw audio bytes
            language: Language code requested from the service
            mime_type: "audio/l16" for raw 16-bit PCM, or a container type
            sample_rate: Sample rate of raw PCM audio in Hz
            channels: Channel count of raw PCM audio

        Returns:
            TranscriptionResult with stripped, non-empty text

        Raises:
            EmptyTranscript: the service returned no usable text
            TranscriptionError: non-success status, network failure or timeout
        """
        pass

    async def close(self) -> None:
        """Clean up backend resources."""
        pass
