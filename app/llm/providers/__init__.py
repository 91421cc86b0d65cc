"""Text generation provider implementations"""

from app.llm.providers.base import BaseTextProvider
from app.llm.providers.ollama import OllamaProvider

__all__ = [
    "BaseTextProvider",
    "OllamaProvider",
]
