"""LLM integration module for chat turns."""

from athena.llm.gemini_client import GeminiClient

__all__ = [
    "GeminiClient",
]
