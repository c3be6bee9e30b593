"""Audio-related data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class RecordingStatus(Enum):
    """Lifecycle of a single recording cycle."""
    IDLE = "idle"
    RECORDING = "recording"
    STOPPED = "stopped"


@dataclass
class AudioStats:
    """Audio recording statistics."""
    status: RecordingStatus
    duration_seconds: float
    elapsed_seconds: int
    sample_rate: int
    fragment_interval_ms: int
    total_fragments: int
    total_bytes: int
    peak_level: float = 0.0

    @property
    def is_recording(self) -> bool:
        return self.status is RecordingStatus.RECORDING


@dataclass
class RecordingSession:
    """Fragments accumulated during one start/stop cycle.

    `chunks` is append-only while the session is recording; once stopped it
    is handed off and never touched again.
    """
    sample_rate: int = 16000
    channels: int = 1
    sample_width: int = 2  # 16-bit PCM
    status: RecordingStatus = RecordingStatus.IDLE
    started_at: Optional[datetime] = None
    chunks: List[bytes] = field(default_factory=list)
    elapsed_seconds: int = 0

    @property
    def total_bytes(self) -> int:
        return sum(len(chunk) for chunk in self.chunks)

    @property
    def bytes_per_second(self) -> int:
        return self.sample_rate * self.channels * self.sample_width


@dataclass(frozen=True)
class AudioPayload:
    """The fully assembled audio for one recording cycle."""
    data: bytes
    mime_type: str = "audio/l16"
    sample_rate: int = 16000
    channels: int = 1
    sample_width: int = 2

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    @property
    def duration_seconds(self) -> float:
        bytes_per_second = self.sample_rate * self.channels * self.sample_width
        if self.mime_type != "audio/l16" or not bytes_per_second:
            return 0.0
        return len(self.data) / bytes_per_second


@dataclass(frozen=True)
class EncodedAudio:
    """Transport-safe (base64) form of an AudioPayload."""
    data: str
    mime_type: str
    sample_rate: int
    channels: int
    byte_length: int
