"""Per-invocation context handed to command handlers"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.discord.client import DiscordClient
from app.llm.providers.base import BaseTextProvider
from app.repositories.restaurant import RestaurantRepository
from app.schemas.audit import Actor
from app.services.audit_service import AuditService
from app.services.restaurant_service import RestaurantService


@dataclass
class CommandContext:
    """Session, caller identity and collaborators for one command"""
    db: AsyncSession
    actor: Actor
    channel_id: Optional[str] = None
    channel_type: Optional[int] = None
    discord: Optional[DiscordClient] = None
    text_provider: Optional[BaseTextProvider] = None

    def __post_init__(self):
        self.restaurants = RestaurantService(RestaurantRepository(self.db))
        self.audit = AuditService(self.db)
