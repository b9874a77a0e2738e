"""Client for OpenAI-compatible chat, streaming, assistants, audio and batch APIs."""

__version__ = "0.1.0"