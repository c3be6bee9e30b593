"""Transcription client: precondition checks in front of a speech backend."""

import asyncio
import logging

from .base import AbstractTranscriptionBackend
from ..audio.encoder import AudioEncoder
from ..errors import InvalidInput
from ..models.audio import EncodedAudio
from ..models.transcription import TranscriptionResult

logger = logging.getLogger(__name__)


class TranscriptionClient:
    """Submits encoded audio to a transcription backend, one call at a time."""

    def __init__(self,
                 backend: AbstractTranscriptionBackend,
                 encoder: AudioEncoder = None,
                 min_audio_bytes: int = 1000):
        """Initialize transcription client.

        Args:
            backend: Speech-recognition backend
            encoder: Decoder for the transport encoding
            min_audio_bytes: Smaller payloads are rejected without a remote call
        """
        self.backend = backend
        self.encoder = encoder or AudioEncoder()
        self.min_audio_bytes = min_audio_bytes

        # A new call waits until the previous one resolves
        self._lock = asyncio.Lock()

    @property
    def is_busy(self) -> bool:
        return self._lock.locked()

    async def transcribe(self, encoded: EncodedAudio, language: str) -> TranscriptionResult:
        """Transcribe encoded audio.

        Raises:
            InvalidInput: payload empty or below the minimum size (no remote call)
            EncodingError: payload is not valid base64
            EmptyTranscript: the service found no speech
            TranscriptionError: the service call failed
        """
        if encoded is None or not encoded.data:
            raise InvalidInput("Audio payload is empty")

        audio_data = self.encoder.decode(encoded)
        if len(audio_data) < self.min_audio_bytes:
            logger.warning(f"Audio data too small: {len(audio_data)} bytes")
            raise InvalidInput(
                f"Audio data too small: {len(audio_data)} bytes (minimum {self.min_audio_bytes})")

        if self.is_busy:
            logger.debug("Waiting for the previous transcription to finish")

        async with self._lock:
            logger.info(f"Transcription request: {len(audio_data)} bytes, language={language}, "
                        f"backend={self.backend.service_name}")
            result = await self.backend.transcribe(
                audio_data,
                language,
                mime_type=encoded.mime_type,
                sample_rate=encoded.sample_rate,
                channels=encoded.channels,
            )

        logger.info(f"Transcription success: '{result.text[:50]}...'")
        return result
