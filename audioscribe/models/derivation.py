"""Data models for transcript derivations (translation, summarization)."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class DerivationKind(Enum):
    TRANSLATE = "translate"
    SUMMARIZE = "summarize"


class DerivationStatus(Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class SummaryType(Enum):
    """Requested summary shape; passed through to the model, never enforced locally."""
    SHORT = "short"        # 4-5 lines
    MEDIUM = "medium"      # 3-4 paragraphs
    DETAILED = "detailed"  # multiple sections


@dataclass(frozen=True)
class DerivationRequest:
    """One user-initiated derivation, with the transcript snapshot it reads."""
    kind: DerivationKind
    parameters: Dict[str, Any]
    source_text: str
    request_id: int
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class DerivationResult:
    """Latest outcome for one derivation kind."""
    kind: DerivationKind
    status: DerivationStatus = DerivationStatus.IDLE
    result_text: str = ""
    error_message: Optional[str] = None
    request_id: Optional[int] = None
    parameters: Dict[str, Any] = field(default_factory=dict)
    stale: bool = False
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def is_terminal(self) -> bool:
        return self.status in (DerivationStatus.SUCCEEDED, DerivationStatus.FAILED)
