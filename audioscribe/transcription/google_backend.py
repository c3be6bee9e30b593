"""Google Speech-to-Text transcription backend."""

import asyncio
import functools
import time
import logging
from typing import Optional

from .base import AbstractTranscriptionBackend
from ..errors import EmptyTranscript, TranscriptionError
from ..models.transcription import TranscriptionResult

from google.cloud import speech
from google.api_core import exceptions as gax_exceptions
from google.oauth2 import service_account

logger = logging.getLogger(__name__)


class GoogleSpeechBackend(AbstractTranscriptionBackend):
    """Google Speech-to-Text API backend for transcription."""

    service_name = "Google Speech-to-Text"

    def __init__(self,
                 credentials_path: Optional[str] = None,
                 use_enhanced: bool = True,
                 enable_automatic_punctuation: bool = True,
                 timeout_seconds: float = 60.0,
                 client=None):
        """Initialize Google Speech backend.

        Args:
            credentials_path: Path to Google Cloud service account JSON file
            use_enhanced: Whether to use enhanced model (costs more but better quality)
            enable_automatic_punctuation: Enable automatic punctuation
            timeout_seconds: Per-request deadline
            client: Pre-built SpeechClient (credentials_path is then optional)
        """
        super().__init__(timeout_seconds)
        self.credentials_path = credentials_path
        if client is None and not self.credentials_path:
            raise ValueError("Google credentials path is required - cannot initialize without credentials")
        self.use_enhanced = use_enhanced
        self.enable_automatic_punctuation = enable_automatic_punctuation
        self.client = client
        self.project_id = None

    def initialize(self) -> None:
        """Create the Speech client from the service account file."""
        if self.client is not None:
            return
        logger.info(f"Loading Google credentials from: {self.credentials_path}")
        credentials = service_account.Credentials.from_service_account_file(self.credentials_path)
        self.client = speech.SpeechClient(credentials=credentials)
        self.project_id = credentials.project_id
        logger.info(f"Using Google Cloud project: {self.project_id}")

    def _build_config(self, language: str, sample_rate: int, channels: int) -> speech.RecognitionConfig:
        return speech.RecognitionConfig(
            encoding=speech.RecognitionConfig.AudioEncoding.LINEAR16,
            sample_rate_hertz=sample_rate,
            audio_channel_count=channels,
            language_code=language,
            use_enhanced=self.use_enhanced,
            enable_automatic_punctuation=self.enable_automatic_punctuation,
            diarization_config=speech.SpeakerDiarizationConfig(enable_speaker_diarization=False),
        )

    async def transcribe(self,
                         audio_data: bytes,
                         language: str,
                         mime_type: str = "audio/l16",
                         sample_rate: int = 16000,
                         channels: int = 1) -> TranscriptionResult:
        """Transcribe audio using Google Speech-to-Text."""
        if mime_type != "audio/l16":
            raise TranscriptionError(f"Google backend only accepts raw PCM audio, got {mime_type}")

        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.initialize)

        start_time = time.time()
        config = self._build_config(language, sample_rate, channels)
        audio = speech.RecognitionAudio(content=audio_data)
        recognize = functools.partial(
            self.client.recognize, config=config, audio=audio, timeout=self.timeout_seconds)

        logger.debug(f"Audio size: {len(audio_data)} bytes; Language: {language}; "
                     f"Enhanced model: {self.use_enhanced}")
        try:
            response = await loop.run_in_executor(None, recognize)
        except gax_exceptions.DeadlineExceeded as e:
            logger.error("Google STT recognize deadline exceeded")
            raise TranscriptionError(f"Google Speech recognize timeout: {e}", status=e.code) from e
        except gax_exceptions.GoogleAPICallError as e:
            logger.error(f"Google STT API call error: {e}")
            raise TranscriptionError(f"Google Speech API error: {e}", status=e.code) from e
        processing_time = time.time() - start_time

        if not response.results or not response.results[0].alternatives:
            logger.debug("--- NO SPEECH DETECTED ---")
            raise EmptyTranscript("No speech detected in the recording")

        recognition_result = response.results[0]
        alternative = recognition_result.alternatives[0]
        text = alternative.transcript.strip()
        if not text:
            raise EmptyTranscript("No speech detected in the recording")

        alternatives = [
            {"text": alt.transcript, "confidence": alt.confidence}
            for alt in recognition_result.alternatives[1:5]
        ]
        logger.info(f"Transcribed {len(text)} chars (confidence: {alternative.confidence:.2f}, "
                    f"processing_time: {processing_time:.3f}s)")
        return TranscriptionResult(
            text=text,
            confidence=alternative.confidence,
            processing_time=processing_time,
            service=self.service_name,
            language=language,
            alternatives=alternatives or None,
        )
