"""audioscribe - record speech, transcribe it, then translate and summarize the transcript."""

__version__ = "0.1.0"
