"""Text generation module"""

from app.llm.providers import BaseTextProvider, OllamaProvider


def get_text_provider() -> BaseTextProvider:
    """Factory used as a FastAPI dependency; overridden in tests"""
    return OllamaProvider()


__all__ = ["BaseTextProvider", "OllamaProvider", "get_text_provider"]
