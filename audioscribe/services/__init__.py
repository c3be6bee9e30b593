"""Services layer for audioscribe application logic."""

from .session_service import SpeechSession

__all__ = [
    "SpeechSession",
]
