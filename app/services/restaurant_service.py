"""Restaurant service: logging wrapper over the restaurant store"""

from typing import List, Optional
from uuid import UUID
import structlog

from app.config import settings
from app.errors import InvalidArgumentError, NotFoundError, DuplicateKeyError
from app.models.restaurant import City, Restaurant
from app.repositories.restaurant import BaseRestaurantRepository

logger = structlog.get_logger()


class RestaurantService:
    """
    Single dependency surface for command handlers.

    Forwards every call to the repository unchanged, logging start, outcome
    and failures. Every exception is re-raised as-is.
    """

    def __init__(self, repository: BaseRestaurantRepository):
        self.repository = repository

    async def upsert_restaurant(self, restaurant: Restaurant) -> Restaurant:
        """Create a new restaurant or update the one with the same id"""
        logger.info(
            "Upserting restaurant",
            restaurant_name=restaurant.name,
            city=restaurant.city.value if restaurant.city else None,
        )
        try:
            result = await self.repository.upsert(restaurant)
        except DuplicateKeyError as e:
            logger.warning("Restaurant already exists", restaurant_name=e.name, city=e.city.value)
            raise
        except InvalidArgumentError as e:
            logger.warning("Invalid restaurant", error=str(e))
            raise
        except Exception:
            logger.error("Error upserting restaurant", exc_info=True)
            raise

        logger.info("Upserted restaurant", restaurant_id=str(result.id), restaurant_name=result.name)
        return result

    async def get_restaurant_by_id(self, restaurant_id: UUID) -> Restaurant:
        """Get a restaurant by id"""
        logger.info("Fetching restaurant", restaurant_id=str(restaurant_id))
        try:
            return await self.repository.get_by_id(restaurant_id)
        except NotFoundError:
            logger.warning("Restaurant not found", restaurant_id=str(restaurant_id))
            raise
        except Exception:
            logger.error("Error fetching restaurant", restaurant_id=str(restaurant_id), exc_info=True)
            raise

    async def find_restaurant(self, name: str, city: City) -> Optional[Restaurant]:
        """Exact name lookup within a city"""
        logger.info("Looking up restaurant by name", restaurant_name=name, city=city.value)
        try:
            return await self.repository.get_by_name_and_city(name, city)
        except Exception:
            logger.error("Error looking up restaurant", restaurant_name=name, city=city.value, exc_info=True)
            raise

    async def get_random_restaurant(self, city: City) -> Optional[Restaurant]:
        """Random restaurant from a city, None when the city has none"""
        logger.info("Fetching random restaurant", city=city.value)
        try:
            result = await self.repository.get_random(city)
        except Exception:
            logger.error("Error fetching random restaurant", city=city.value, exc_info=True)
            raise

        if result is None:
            logger.info("No restaurants found", city=city.value)
        else:
            logger.info("Found random restaurant", restaurant_name=result.name, city=city.value)
        return result

    async def search_restaurants(
        self,
        name: str,
        city: City,
        page_size: Optional[int] = None,
        page_number: int = 1,
    ) -> List[Restaurant]:
        """Search by partial name within a city"""
        if page_size is None:
            page_size = settings.default_page_size
        logger.info(
            "Searching restaurants",
            name=name,
            city=city.value,
            page_size=page_size,
            page_number=page_number,
        )
        try:
            results = await self.repository.search_by_name_in_city(name, city, page_size, page_number)
        except InvalidArgumentError as e:
            logger.warning("Invalid search criteria", error=str(e))
            raise
        except Exception:
            logger.error("Error searching restaurants", exc_info=True)
            raise

        logger.info("Search finished", count=len(results))
        return results

    async def search_restaurants_by_name(
        self,
        name: str,
        page_size: Optional[int] = None,
        page_number: int = 1,
    ) -> List[Restaurant]:
        """Search by partial name across all cities"""
        if page_size is None:
            page_size = settings.autocomplete_max_results
        logger.info("Searching restaurants in all cities", name=name, page_size=page_size, page_number=page_number)
        try:
            results = await self.repository.search_by_name(name, page_size, page_number)
        except InvalidArgumentError as e:
            logger.warning("Invalid search criteria", error=str(e))
            raise
        except Exception:
            logger.error("Error searching restaurants", exc_info=True)
            raise

        logger.info("Search finished", count=len(results))
        return results

    async def get_restaurants_by_city(
        self,
        city: City,
        page_size: Optional[int] = None,
        page_number: int = 1,
    ) -> List[Restaurant]:
        """List restaurants in a city, by name"""
        if page_size is None:
            page_size = settings.default_page_size
        logger.info("Listing restaurants", city=city.value, page_size=page_size, page_number=page_number)
        try:
            results = await self.repository.list_by_city(city, page_size, page_number)
        except InvalidArgumentError as e:
            logger.warning("Invalid page request", error=str(e))
            raise
        except Exception:
            logger.error("Error listing restaurants", city=city.value, exc_info=True)
            raise

        logger.info("Listed restaurants", city=city.value, count=len(results))
        return results

    async def delete_restaurant(self, restaurant_id: UUID) -> None:
        """Delete a restaurant by id"""
        logger.info("Deleting restaurant", restaurant_id=str(restaurant_id))
        try:
            await self.repository.delete(restaurant_id)
        except NotFoundError:
            logger.warning("Restaurant not found for deletion", restaurant_id=str(restaurant_id))
            raise
        except Exception:
            logger.error("Error deleting restaurant", restaurant_id=str(restaurant_id), exc_info=True)
            raise

        logger.info("Deleted restaurant", restaurant_id=str(restaurant_id))
