"""Transcript derivations: translation and summarization."""

from .orchestrator import DerivationOrchestrator
from .summarization import SummarizationClient
from .translation import TranslationClient

__all__ = [
    "DerivationOrchestrator",
    "SummarizationClient",
    "TranslationClient",
]
