"""Event models published on the pub/sub topics."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class AudioFragmentEvent:
    """A fragment of audio appended to the current recording."""
    sequence_number: int
    audio_data: bytes
    timestamp: float  # Unix timestamp when the fragment arrived
    total_bytes: int  # Bytes buffered so far, this fragment included
    peak_level: float = 0.0  # 0.0 to 1.0


@dataclass
class CaptureErrorEvent:
    """Capture failed; the recording attempt is over."""
    error: Exception
    stage: str = "capture"
    timestamp: datetime = field(default_factory=datetime.now)
    detail: Optional[str] = None
