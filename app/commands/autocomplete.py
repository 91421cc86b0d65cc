"""Restaurant option autocomplete"""

from typing import List
import structlog

from app.config import settings
from app.services.restaurant_service import RestaurantService

logger = structlog.get_logger()

# Discord caps choice names and string values at 100 characters
MAX_CHOICE_LENGTH = 100


async def restaurant_choices(service: RestaurantService, user_input: str) -> List[dict]:
    """
    Choices for the partially typed restaurant name.

    Nothing is queried until the user has typed enough characters.
    """
    if len(user_input) < settings.autocomplete_min_chars:
        return []

    matches = await service.search_restaurants_by_name(
        user_input,
        page_size=settings.autocomplete_max_results,
    )
    return [
        {
            "name": f"{r.name} — {r.city.value}"[:MAX_CHOICE_LENGTH],
            "value": str(r.id),
        }
        for r in matches
    ]
