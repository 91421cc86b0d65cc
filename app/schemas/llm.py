"""Ollama generate API schemas"""

from typing import Optional
from pydantic import BaseModel


class OllamaGenerateRequest(BaseModel):
    """Body for POST /api/generate"""
    model: str
    prompt: str
    stream: bool = False


class OllamaGenerateResponse(BaseModel):
    """Non-streaming generate response"""
    model: Optional[str] = None
    response: Optional[str] = None
    done: bool = False
