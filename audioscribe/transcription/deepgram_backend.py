"""Deepgram speech-to-text transcription backend."""

import asyncio
import time
import logging
from typing import Any, Dict

import aiohttp

from .base import AbstractTranscriptionBackend
from ..errors import EmptyTranscript, TranscriptionError
from ..models.transcription import TranscriptionResult

logger = logging.getLogger(__name__)


class DeepgramBackend(AbstractTranscriptionBackend):
    """Deepgram pre-recorded audio API backend."""

    service_name = "Deepgram"

    def __init__(self,
                 api_key: str,
                 base_url: str = "https://api.deepgram.com/v1/listen",
                 model: str = "nova-2",
                 timeout_seconds: float = 60.0):
        """Initialize Deepgram backend.

        Args:
            api_key: Deepgram API key
            base_url: Listen endpoint
            model: Deepgram model name
            timeout_seconds: Total time allowed for one request
        """
        super().__init__(timeout_seconds)
        if not api_key:
            raise ValueError("Deepgram API key is required - cannot initialize without credentials")
        self.api_key = api_key
        self.base_url = base_url
        self.model = model

        logger.info(f"DeepgramBackend initialized with model: {model}")

    def _build_params(self, language: str, mime_type: str, sample_rate: int, channels: int) -> Dict[str, str]:
        params = {
            "model": self.model,
            "smart_format": "true",
            "language": language,
            "punctuate": "true",
            "diarize": "false",
        }
        if mime_type == "audio/l16":
            # Raw PCM has no header, so the format must be spelled out
            params.update({
                "encoding": "linear16",
                "sample_rate": str(sample_rate),
                "channels": str(channels),
            })
        return params

    async def transcribe(self,
                         audio_data: bytes,
                         language: str,
                         mime_type: str = "audio/l16",
                         sample_rate: int = 16000,
                         channels: int = 1) -> TranscriptionResult:
        """Transcribe audio using the Deepgram listen endpoint."""
        start_time = time.time()
        headers = {
            "Authorization": f"Token {self.api_key}",
            "Content-Type": mime_type,
        }
        params = self._build_params(language, mime_type, sample_rate, channels)

        logger.debug(f"Audio size: {len(audio_data)} bytes; Language: {language}; Model: {self.model}")

        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(self.base_url, headers=headers, params=params,
                                        data=audio_data) as response:
                    logger.debug(f"Deepgram response status: {response.status}")
                    if response.status != 200:
                        error_text = await response.text()
                        logger.error(f"Deepgram error: status={response.status}, body={error_text}")
                        raise TranscriptionError(
                            f"Deepgram API error: {response.status} - {error_text}",
                            status=response.status)
                    result = await response.json(content_type=None)
        except asyncio.TimeoutError as e:
            logger.error(f"Deepgram request timed out after {self.timeout_seconds}s")
            raise TranscriptionError(
                f"Deepgram request timed out after {self.timeout_seconds}s") from e
        except aiohttp.ClientError as e:
            logger.error(f"Deepgram request failed: {e}")
            raise TranscriptionError(f"Deepgram request failed: {e}") from e
        except ValueError as e:
            raise TranscriptionError(f"Deepgram returned malformed JSON: {e}") from e

        processing_time = time.time() - start_time
        return self.__extract_transcription_result(result, processing_time, language)

    def __extract_transcription_result(self, result: Dict[str, Any], processing_time: float,
                                       language: str) -> TranscriptionResult:
        channels = (result.get("results") or {}).get("channels") or []
        if not channels:
            logger.debug("--- NO CHANNELS IN RESPONSE ---")
            raise EmptyTranscript("Speech service returned no channels")

        alternatives = channels[0].get("alternatives") or []
        if not alternatives:
            logger.debug("--- NO ALTERNATIVES IN RESPONSE ---")
            raise EmptyTranscript("Speech service returned no alternatives")

        top = alternatives[0]
        transcript = (top.get("transcript") or "").strip()
        confidence = top.get("confidence") or 0.0
        logger.debug(f"Raw transcript='{transcript}' (conf={confidence}, "
                     f"total_alternatives={len(alternatives)})")

        if not transcript:
            raise EmptyTranscript("No speech detected in the recording")

        others = [
            {"text": alt.get("transcript", ""), "confidence": alt.get("confidence", 0.0)}
            for alt in alternatives[1:5]
        ]
        logger.info(f"Transcribed {len(transcript)} chars (confidence: {confidence:.2f}, "
                    f"processing_time: {processing_time:.3f}s)")
        return TranscriptionResult(
            text=transcript,
            confidence=confidence,
            processing_time=processing_time,
            service=self.service_name,
            language=language,
            alternatives=others or None,
        )
