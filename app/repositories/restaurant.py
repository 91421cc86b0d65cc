"""Restaurant store: persistence and queries over the restaurants table"""

import random
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import DuplicateKeyError, InvalidArgumentError, NotFoundError
from app.models.restaurant import City, Restaurant
from app.pagination import page_offset


class BaseRestaurantRepository(ABC):
    """Store operations the restaurant service depends on"""

    @abstractmethod
    async def upsert(self, restaurant: Restaurant) -> Restaurant:
        """Insert, or overwrite name/city/url of the row with the same id"""

    @abstractmethod
    async def get_by_id(self, restaurant_id: uuid.UUID) -> Restaurant:
        """Fetch one restaurant; raises NotFoundError"""

    @abstractmethod
    async def get_by_name_and_city(self, name: str, city: City) -> Optional[Restaurant]:
        """Exact (trimmed) name lookup within a city"""

    @abstractmethod
    async def get_random(self, city: City) -> Optional[Restaurant]:
        """Uniformly random restaurant in a city, None when the city is empty"""

    @abstractmethod
    async def search_by_name_in_city(
        self,
        name: str,
        city: City,
        page_size: int,
        page_number: int = 1,
    ) -> List[Restaurant]:
        """Substring search within one city; blank name is rejected"""

    @abstractmethod
    async def search_by_name(
        self,
        name: str,
        page_size: int,
        page_number: int = 1,
    ) -> List[Restaurant]:
        """Substring search across cities; blank name matches everything"""

    @abstractmethod
    async def list_by_city(
        self,
        city: City,
        page_size: int,
        page_number: int = 1,
    ) -> List[Restaurant]:
        """All restaurants of a city, by name"""

    @abstractmethod
    async def delete(self, restaurant_id: uuid.UUID) -> None:
        """Remove a restaurant; raises NotFoundError"""


class RestaurantRepository(BaseRestaurantRepository):
    """
    SQLAlchemy implementation.

    Writes are flushed, never committed: the caller owns the transaction so
    a mutation and its audit entry share one commit.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def upsert(self, restaurant: Restaurant) -> Restaurant:
        name = (restaurant.name or "").strip()
        if not name:
            raise InvalidArgumentError("Restaurant name cannot be empty.")
        if restaurant.city is None:
            raise InvalidArgumentError("Restaurant city is required.")
        city = City(restaurant.city)
        url = (restaurant.url or "").strip() or None

        # Savepoint: a rejected write rolls back only itself, earlier
        # flushes in the caller's transaction survive
        try:
            async with self.db.begin_nested():
                existing = None
                if restaurant.id is not None:
                    existing = await self.db.get(Restaurant, restaurant.id)

                if existing is not None:
                    existing.name = name
                    existing.city = city
                    existing.url = url
                    target = existing
                else:
                    if restaurant.id is None:
                        restaurant.id = uuid.uuid4()
                    restaurant.name = name
                    restaurant.city = city
                    restaurant.url = url
                    self.db.add(restaurant)
                    target = restaurant

                await self.db.flush()
        except IntegrityError as exc:
            raise DuplicateKeyError(name, city) from exc

        return target

    async def get_by_id(self, restaurant_id: uuid.UUID) -> Restaurant:
        result = await self.db.execute(
            select(Restaurant).where(Restaurant.id == restaurant_id)
        )
        restaurant = result.scalar_one_or_none()
        if restaurant is None:
            raise NotFoundError("Restaurant", restaurant_id)
        return restaurant

    async def get_by_name_and_city(self, name: str, city: City) -> Optional[Restaurant]:
        result = await self.db.execute(
            select(Restaurant).where(
                Restaurant.name == name.strip(),
                Restaurant.city == city,
            )
        )
        return result.scalar_one_or_none()

    async def get_random(self, city: City) -> Optional[Restaurant]:
        count = await self.db.scalar(
            select(func.count(Restaurant.id)).where(Restaurant.city == city)
        )
        if not count:
            return None

        index = random.randrange(count)

        result = await self.db.execute(
            select(Restaurant)
            .where(Restaurant.city == city)
            .order_by(Restaurant.name, Restaurant.id)
            .offset(index)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def search_by_name_in_city(
        self,
        name: str,
        city: City,
        page_size: int,
        page_number: int = 1,
    ) -> List[Restaurant]:
        if not name or not name.strip():
            raise InvalidArgumentError("Restaurant name cannot be null or empty.")
        offset = page_offset(page_size, page_number)

        result = await self.db.execute(
            select(Restaurant)
            .where(
                Restaurant.city == city,
                Restaurant.name.contains(name, autoescape=True),
            )
            .order_by(Restaurant.name)
            .offset(offset)
            .limit(page_size)
        )
        return list(result.scalars().all())

    async def search_by_name(
        self,
        name: str,
        page_size: int,
        page_number: int = 1,
    ) -> List[Restaurant]:
        offset = page_offset(page_size, page_number)

        query = select(Restaurant)
        if name and name.strip():
            query = query.where(Restaurant.name.contains(name, autoescape=True))
        query = query.order_by(Restaurant.name).offset(offset).limit(page_size)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_by_city(
        self,
        city: City,
        page_size: int,
        page_number: int = 1,
    ) -> List[Restaurant]:
        offset = page_offset(page_size, page_number)

        result = await self.db.execute(
            select(Restaurant)
            .where(Restaurant.city == city)
            .order_by(Restaurant.name)
            .offset(offset)
            .limit(page_size)
        )
        return list(result.scalars().all())

    async def delete(self, restaurant_id: uuid.UUID) -> None:
        restaurant = await self.db.get(Restaurant, restaurant_id)
        if restaurant is None:
            raise NotFoundError("Restaurant", restaurant_id)

        await self.db.delete(restaurant)
        await self.db.flush()
