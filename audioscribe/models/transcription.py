"""Transcription-related data models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class TranscriptionResult:
    """Result of a transcription operation."""
    text: str
    confidence: float
    processing_time: float
    service: str
    language: str = "ja"
    timestamp: datetime = field(default_factory=datetime.now)
    alternatives: Optional[List[dict]] = None
