"""Meeting notes summarizer service."""

__version__ = "1.0.0"
