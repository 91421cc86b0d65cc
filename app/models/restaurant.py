"""Restaurant catalog model"""

import enum
import uuid
from sqlalchemy import Column, String, Enum, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID

from app.database import Base


class City(str, enum.Enum):
    """Cities the catalog covers"""
    RAMALLAH = "Ramallah"
    NABLUS = "Nablus"


class Restaurant(Base):
    """A catalogued eatery, unique by (name, city)"""
    __tablename__ = "restaurants"
    __table_args__ = (
        UniqueConstraint("name", "city", name="uq_restaurants_name_city"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    city = Column(Enum(City, name="city"), nullable=False)
    url = Column(String(2048))

    def __repr__(self) -> str:
        return f"<Restaurant {self.id} {self.name!r} ({self.city.value if self.city else None})>"
