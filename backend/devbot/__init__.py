"""DevBot - conversational session engine for Gemini-backed coding chat."""

__version__ = "0.1.0"
