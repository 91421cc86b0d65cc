"""Base text generation provider interface"""

from abc import ABC, abstractmethod


class BaseTextProvider(ABC):
    """Abstract base class for text generation backends"""
    
    def __init__(self, model: str):
        self.model = model
    
    @abstractmethod
    async def generate_response(self, prompt: str) -> str:
        """Generate text for a prompt; raises AIServiceError on failure"""
        pass
