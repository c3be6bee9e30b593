"""Session-level state shared by the orchestrator and the session facade."""

from dataclasses import dataclass, field
from typing import Dict, Optional

from .derivation import DerivationKind, DerivationResult
from .transcription import TranscriptionResult


@dataclass
class SessionState:
    """Process-local state for one active user session.

    `transcript` is a single mutable cell. Only a successful transcription or
    an explicit user edit writes it.
    """
    transcript: str = ""
    transcript_source: Optional[str] = None  # "transcription" | "edit"
    last_transcription: Optional[TranscriptionResult] = None
    results: Dict[DerivationKind, DerivationResult] = field(default_factory=dict)
    last_error: Optional[str] = None

    def __post_init__(self):
        for kind in DerivationKind:
            self.results.setdefault(kind, DerivationResult(kind=kind))

    @property
    def has_transcript(self) -> bool:
        return bool(self.transcript and self.transcript.strip())
