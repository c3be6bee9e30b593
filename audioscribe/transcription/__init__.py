"""Transcription module for audioscribe."""

from .base import AbstractTranscriptionBackend
from ..models.transcription import TranscriptionResult
from .client import TranscriptionClient
from .deepgram_backend import DeepgramBackend
from .google_backend import GoogleSpeechBackend
from .publisher import ResultPublisher

__all__ = [
    "AbstractTranscriptionBackend",
    "TranscriptionResult",
    "TranscriptionClient",
    "DeepgramBackend",
    "GoogleSpeechBackend",
    "ResultPublisher",
]
