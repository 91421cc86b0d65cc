"""Restaurant catalog commands: add, update, delete, upsert, suggest, order, list, search"""

import uuid
from typing import Optional, Tuple
import structlog

from app.commands import messages
from app.commands.context import CommandContext
from app.database import transaction
from app.errors import DuplicateKeyError, InvalidArgumentError, NotFoundError, ValidationRejectedError
from app.models.restaurant import City, Restaurant
from app.schemas.discord import ChannelType
from app.schemas.restaurant import RestaurantSnapshot
from app.validation import (
    is_valid_url,
    parse_city,
    parse_restaurant_id,
    require_city,
    require_name,
    require_url,
)

logger = structlog.get_logger()

REJECTION_MESSAGES = {
    "name": messages.EMPTY_NAME,
    "city": messages.INVALID_CITY,
    "url": messages.INVALID_URL,
}


def _validate_listing(
    name: Optional[str],
    city: Optional[str],
    url: Optional[str],
) -> Tuple[str, City, Optional[str]]:
    """Trimmed name, parsed city and cleaned url for add/upsert"""
    return require_name(name), require_city(city), require_url(url)


def parse_page(value: Optional[str]) -> Optional[int]:
    """Page option as int; 1 when omitted, None when not a number"""
    if value is None or not str(value).strip():
        return 1
    try:
        return int(str(value).strip())
    except ValueError:
        return None


async def add(
    ctx: CommandContext,
    name: Optional[str],
    city: Optional[str],
    url: Optional[str] = None,
) -> str:
    """Add a new restaurant and record its creation"""
    logger.info("Add command invoked", user=ctx.actor.name, name=name, city_option=city, url=url)

    try:
        name, parsed_city, url = _validate_listing(name, city, url)
    except ValidationRejectedError as e:
        return REJECTION_MESSAGES[e.field]

    try:
        async with transaction(ctx.db):
            restaurant = await ctx.restaurants.upsert_restaurant(
                Restaurant(
                    id=uuid.uuid4(),
                    name=name,
                    city=parsed_city,
                    url=url,
                )
            )
            await ctx.audit.log_create(restaurant, ctx.actor.name, ctx.actor.id)
    except DuplicateKeyError:
        return messages.duplicate_name(name)
    except Exception:
        logger.error("Error adding restaurant", name=name, city_option=city, exc_info=True)
        return messages.generic_error("adding the restaurant")

    logger.info(
        "Added restaurant",
        restaurant_name=restaurant.name,
        city=parsed_city.value,
        user=ctx.actor.name,
    )
    return messages.restaurant_card("Restaurant added successfully!", restaurant)


async def update(
    ctx: CommandContext,
    restaurant: Optional[str],
    name: Optional[str] = None,
    city: Optional[str] = None,
    url: Optional[str] = None,
) -> str:
    """
    Update selected fields of a restaurant.

    Blank options keep the current value; url "remove" clears the URL.
    """
    logger.info("Update command invoked", user=ctx.actor.name, restaurant_id=restaurant)

    restaurant_id = parse_restaurant_id(restaurant)
    if restaurant_id is None:
        return messages.INVALID_RESTAURANT

    new_name = name.strip() if name and name.strip() else None

    new_city = None
    if city and city.strip():
        new_city = parse_city(city)
        if new_city is None:
            return messages.INVALID_CITY

    change_url = False
    new_url = None
    if url is not None:
        if url.strip().lower() == "remove":
            change_url = True
        elif url.strip():
            if not is_valid_url(url):
                return messages.INVALID_URL_OR_REMOVE
            change_url = True
            new_url = url.strip()

    if new_name is None and new_city is None and not change_url:
        return messages.NO_CHANGES

    try:
        async with transaction(ctx.db):
            current = await ctx.restaurants.get_restaurant_by_id(restaurant_id)
            old = RestaurantSnapshot.model_validate(current)

            updated = await ctx.restaurants.upsert_restaurant(
                Restaurant(
                    id=restaurant_id,
                    name=new_name if new_name is not None else current.name,
                    city=new_city if new_city is not None else current.city,
                    url=new_url if change_url else current.url,
                )
            )
            await ctx.audit.log_update(restaurant_id, old, updated, ctx.actor.name, ctx.actor.id)
    except NotFoundError:
        return messages.NOT_FOUND
    except DuplicateKeyError:
        return messages.DUPLICATE_IN_CITY
    except Exception:
        logger.error("Error updating restaurant", restaurant_id=str(restaurant_id), exc_info=True)
        return messages.generic_error("updating the restaurant")

    logger.info("Updated restaurant", restaurant_id=str(restaurant_id), user=ctx.actor.name)
    return messages.restaurant_card("Restaurant updated successfully!", updated)


async def delete(ctx: CommandContext, restaurant: Optional[str]) -> str:
    """Delete a restaurant, recording its last state first"""
    logger.info("Delete command invoked", user=ctx.actor.name, restaurant_id=restaurant)

    restaurant_id = parse_restaurant_id(restaurant)
    if restaurant_id is None:
        return messages.INVALID_RESTAURANT

    try:
        async with transaction(ctx.db):
            current = await ctx.restaurants.get_restaurant_by_id(restaurant_id)
            snapshot = RestaurantSnapshot.model_validate(current)
            await ctx.audit.log_delete(snapshot, ctx.actor.name, ctx.actor.id)
            await ctx.restaurants.delete_restaurant(restaurant_id)
    except NotFoundError:
        return messages.NOT_FOUND
    except Exception:
        logger.error("Error deleting restaurant", restaurant_id=str(restaurant_id), exc_info=True)
        return messages.generic_error("deleting the restaurant")

    logger.info("Deleted restaurant", restaurant_name=snapshot.name, restaurant_id=str(restaurant_id))
    return f"✅ Successfully deleted **{snapshot.name}** from **{snapshot.city.value}**."


async def upsert(
    ctx: CommandContext,
    name: Optional[str],
    city: Optional[str],
    url: Optional[str] = None,
) -> str:
    """Create a restaurant, or replace the URL of the one with the same name in the city"""
    logger.info("Upsert command invoked", user=ctx.actor.name, name=name, city_option=city, url=url)

    try:
        name, parsed_city, url = _validate_listing(name, city, url)
    except ValidationRejectedError as e:
        return REJECTION_MESSAGES[e.field]

    try:
        async with transaction(ctx.db):
            existing = await ctx.restaurants.find_restaurant(name, parsed_city)
            if existing is None:
                saved = await ctx.restaurants.upsert_restaurant(
                    Restaurant(
                        id=uuid.uuid4(),
                        name=name,
                        city=parsed_city,
                        url=url,
                    )
                )
                await ctx.audit.log_create(saved, ctx.actor.name, ctx.actor.id)
            else:
                old = RestaurantSnapshot.model_validate(existing)
                saved = await ctx.restaurants.upsert_restaurant(
                    Restaurant(id=existing.id, name=existing.name, city=existing.city, url=url)
                )
                await ctx.audit.log_update(saved.id, old, saved, ctx.actor.name, ctx.actor.id)
    except DuplicateKeyError:
        # Lost a race with a concurrent create of the same name
        return messages.duplicate_name(name)
    except Exception:
        logger.error("Error upserting restaurant", name=name, city_option=city, exc_info=True)
        return messages.generic_error("saving the restaurant")

    logger.info("Upserted restaurant", restaurant_name=saved.name, city=parsed_city.value, user=ctx.actor.name)
    return messages.restaurant_card("Restaurant saved successfully!", saved)


async def suggest(ctx: CommandContext, city: Optional[str]) -> str:
    """Random restaurant from a city"""
    logger.info("Suggest command invoked", user=ctx.actor.name, city_option=city)

    parsed_city = parse_city(city)
    if parsed_city is None:
        return messages.INVALID_CITY

    try:
        restaurant = await ctx.restaurants.get_random_restaurant(parsed_city)
    except Exception:
        logger.error("Error suggesting restaurant", city_option=city, exc_info=True)
        return messages.generic_error("fetching a restaurant suggestion")

    if restaurant is None:
        return f"😔 No restaurants found in **{parsed_city.value}**. Please add some restaurants first!"

    message = f"🍽️ **Restaurant Suggestion for {parsed_city.value}**\n\n**{restaurant.name}**\n"
    if restaurant.url:
        message += f"🔗 {restaurant.url}"
    return message


def build_order_message(restaurant: Restaurant) -> str:
    message = f"🍽️ **We would like to order from {restaurant.name}. Please put your order below!**\n\n"
    if restaurant.url:
        message += f"🔗 **Menu/Website:** {restaurant.url}\n\n"
    message += f"📍 **Location:** {restaurant.city.value}\n\n"
    message += "👇 **Post your orders as replies to this thread!**"
    return message


async def order(ctx: CommandContext, restaurant: Optional[str]) -> str:
    """Open an order thread for a restaurant in the current channel"""
    logger.info("Order command invoked", user=ctx.actor.name, restaurant_id=restaurant)

    restaurant_id = parse_restaurant_id(restaurant)
    if restaurant_id is None:
        return messages.INVALID_RESTAURANT

    try:
        target = await ctx.restaurants.get_restaurant_by_id(restaurant_id)

        if ctx.channel_type != ChannelType.GUILD_TEXT or not ctx.channel_id or ctx.discord is None:
            return messages.INVALID_CHANNEL

        thread = await ctx.discord.create_thread(ctx.channel_id, target.name)
        logger.info("Created order thread", thread_id=thread["id"], restaurant_name=target.name)

        await ctx.discord.send_message(thread["id"], build_order_message(target))
    except NotFoundError:
        return messages.NOT_FOUND
    except Exception:
        logger.error("Error creating order thread", restaurant_id=str(restaurant_id), exc_info=True)
        return messages.generic_error("creating the order thread")

    return (
        "✅ **Order thread created successfully!**\n\n"
        f"📍 **Restaurant:** {target.name}\n"
        f"🧵 **Thread:** <#{thread['id']}>\n\n"
        "The thread has been created and everyone can now place their orders!"
    )


def _listing_line(restaurant: Restaurant) -> str:
    line = f"• **{restaurant.name}**"
    if restaurant.url:
        line += f" <{restaurant.url}>"
    return line


async def list_restaurants(ctx: CommandContext, city: Optional[str], page: Optional[str] = None) -> str:
    """One page of a city's restaurants"""
    logger.info("List command invoked", user=ctx.actor.name, city_option=city, page=page)

    parsed_city = parse_city(city)
    if parsed_city is None:
        return messages.INVALID_CITY

    page_number = parse_page(page)
    if page_number is None:
        return messages.INVALID_PAGE

    try:
        results = await ctx.restaurants.get_restaurants_by_city(parsed_city, page_number=page_number)
    except InvalidArgumentError:
        return messages.INVALID_PAGE
    except Exception:
        logger.error("Error listing restaurants", city_option=city, exc_info=True)
        return messages.generic_error("listing restaurants")

    if not results:
        return f"😔 No restaurants found in **{parsed_city.value}** on page {page_number}."

    header = f"🏙️ **Restaurants in {parsed_city.value}** (page {page_number})\n"
    return messages.fit([_listing_line(r) for r in results], header=header)


async def search(
    ctx: CommandContext,
    name: Optional[str],
    city: Optional[str],
    page: Optional[str] = None,
) -> str:
    """City-scoped name search"""
    logger.info("Search command invoked", user=ctx.actor.name, name=name, city_option=city, page=page)

    parsed_city = parse_city(city)
    if parsed_city is None:
        return messages.INVALID_CITY

    page_number = parse_page(page)
    if page_number is None:
        return messages.INVALID_PAGE

    try:
        results = await ctx.restaurants.search_restaurants(name or "", parsed_city, page_number=page_number)
    except InvalidArgumentError as e:
        return f"❌ {e}"
    except Exception:
        logger.error("Error searching restaurants", name=name, city_option=city, exc_info=True)
        return messages.generic_error("searching restaurants")

    if not results:
        return f"🔍 No restaurants matching **{name}** in **{parsed_city.value}**."

    header = f"🔍 **Matches for '{name}' in {parsed_city.value}** (page {page_number})\n"
    return messages.fit([_listing_line(r) for r in results], header=header)
