"""Restaurant schemas"""

from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict

from app.models.restaurant import City


class RestaurantSnapshot(BaseModel):
    """Detached copy of a restaurant's tracked fields"""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: UUID
    name: str
    city: City
    url: Optional[str] = None

    def as_details(self) -> dict:
        """JSON-ready snapshot used in audit change details"""
        return {
            "id": str(self.id),
            "name": self.name,
            "city": self.city.value,
            "url": self.url,
        }
