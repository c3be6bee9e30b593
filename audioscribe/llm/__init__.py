"""Language-model access for audioscribe."""

from .engine import ChatCompletionEngine

__all__ = [
    "ChatCompletionEngine",
]
