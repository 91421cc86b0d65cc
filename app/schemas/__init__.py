"""Pydantic schemas for payload validation"""

from app.schemas.audit import Actor
from app.schemas.restaurant import RestaurantSnapshot
from app.schemas.llm import (
    OllamaGenerateRequest,
    OllamaGenerateResponse,
)
from app.schemas.discord import (
    ChannelType,
    CommandOption,
    Interaction,
    InteractionCallbackType,
    InteractionData,
    InteractionType,
)

__all__ = [
    "Actor",
    "RestaurantSnapshot",
    "OllamaGenerateRequest",
    "OllamaGenerateResponse",
    "ChannelType",
    "CommandOption",
    "Interaction",
    "InteractionCallbackType",
    "InteractionData",
    "InteractionType",
]
