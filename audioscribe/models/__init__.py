"""Data models for the audioscribe application."""

from .audio import AudioStats, AudioPayload, EncodedAudio, RecordingSession, RecordingStatus
from .events import AudioFragmentEvent, CaptureErrorEvent
from .transcription import TranscriptionResult
from .derivation import (
    DerivationKind,
    DerivationStatus,
    DerivationRequest,
    DerivationResult,
    SummaryType,
)
from .session import SessionState

__all__ = [
    "AudioStats",
    "AudioPayload",
    "EncodedAudio",
    "RecordingSession",
    "RecordingStatus",
    "AudioFragmentEvent",
    "CaptureErrorEvent",
    "TranscriptionResult",
    # Derivation models
    "DerivationKind",
    "DerivationStatus",
    "DerivationRequest",
    "DerivationResult",
    "SummaryType",
    "SessionState",
]
