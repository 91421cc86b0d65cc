"""Tests for command handlers"""

import uuid

import pytest
from sqlalchemy import func, select

from app.commands import HANDLERS, history, general, messages, restaurants, run_command
from app.commands.autocomplete import restaurant_choices
from app.errors import AIServiceError, NotFoundError
from app.models.audit import AuditAction, RestaurantAuditLog
from app.models.restaurant import City, Restaurant
from app.schemas.discord import ChannelType


async def audit_entries(db, restaurant_id=None):
    query = select(RestaurantAuditLog).order_by(RestaurantAuditLog.timestamp, RestaurantAuditLog.id)
    if restaurant_id is not None:
        query = query.where(RestaurantAuditLog.restaurant_id == restaurant_id)
    result = await db.execute(query)
    return list(result.scalars().all())


async def find(db, name, city):
    result = await db.execute(select(Restaurant).where(Restaurant.name == name, Restaurant.city == city))
    return result.scalar_one_or_none()


async def failing_write(*args, **kwargs):
    raise RuntimeError("audit table unavailable")


@pytest.mark.asyncio
async def test_add_restaurant(test_db, command_context):
    """Test adding a restaurant writes the row and a Create entry"""
    reply = await restaurants.add(command_context, "Zamn", "-r", "https://zamn.ps")

    assert reply.startswith("✅ **Restaurant added successfully!**")
    assert "https://zamn.ps" in reply

    restaurant = await find(test_db, "Zamn", City.RAMALLAH)
    assert restaurant is not None

    entries = await audit_entries(test_db, restaurant.id)
    assert len(entries) == 1
    assert entries[0].action == AuditAction.CREATE
    assert entries[0].actor_name == "tester"


@pytest.mark.asyncio
async def test_add_rejects_bad_input_before_storing(test_db, command_context):
    assert await restaurants.add(command_context, "  ", "-r") == messages.EMPTY_NAME
    assert await restaurants.add(command_context, "Zamn", "ramallah") == messages.INVALID_CITY
    assert await restaurants.add(command_context, "Zamn", "-r", "zamn.ps") == messages.INVALID_URL

    assert await test_db.scalar(select(func.count(Restaurant.id))) == 0
    assert await audit_entries(test_db) == []


@pytest.mark.asyncio
async def test_add_duplicate(test_db, command_context, test_restaurants):
    reply = await restaurants.add(command_context, "Zamn", "R")

    assert reply == messages.duplicate_name("Zamn")
    assert await audit_entries(test_db) == []


@pytest.mark.asyncio
async def test_add_rolls_back_when_audit_write_fails(test_db, command_context, monkeypatch):
    """Test a failed Create entry leaves no restaurant behind"""
    monkeypatch.setattr(command_context.audit, "_write", failing_write)

    reply = await restaurants.add(command_context, "Darna", "-r")

    assert reply == messages.generic_error("adding the restaurant")
    assert await test_db.scalar(select(func.count(Restaurant.id))) == 0
    assert await audit_entries(test_db) == []


@pytest.mark.asyncio
async def test_update_requires_a_change(command_context, test_restaurants):
    reply = await restaurants.update(command_context, str(test_restaurants[0].id), name=" ", city="", url=None)

    assert reply == messages.NO_CHANGES


@pytest.mark.asyncio
async def test_update_rejects_free_text_restaurant(command_context):
    assert await restaurants.update(command_context, "Zamn", name="Other") == messages.INVALID_RESTAURANT


@pytest.mark.asyncio
async def test_update_unknown_restaurant(command_context):
    assert await restaurants.update(command_context, str(uuid.uuid4()), name="Other") == messages.NOT_FOUND


@pytest.mark.asyncio
async def test_update_remove_url(test_db, command_context, test_restaurants):
    target = test_restaurants[0]

    reply = await restaurants.update(command_context, str(target.id), url="REMOVE")

    assert reply.startswith("✅ **Restaurant updated successfully!**")
    entries = await audit_entries(test_db, target.id)
    assert len(entries) == 1
    assert "(removed)" in entries[0].change_description


@pytest.mark.asyncio
async def test_update_invalid_url(command_context, test_restaurants):
    reply = await restaurants.update(command_context, str(test_restaurants[0].id), url="ftp://zamn.ps")

    assert reply == messages.INVALID_URL_OR_REMOVE


@pytest.mark.asyncio
async def test_update_same_value_writes_no_entry(test_db, command_context, test_restaurants):
    target = test_restaurants[0]

    await restaurants.update(command_context, str(target.id), name=target.name)

    assert await audit_entries(test_db, target.id) == []


@pytest.mark.asyncio
async def test_update_into_duplicate(test_db, command_context, test_restaurants):
    """Test renaming onto an existing name in the city is refused and nothing is logged"""
    reply = await restaurants.update(command_context, str(test_restaurants[1].id), name="Zamn")

    assert reply == messages.DUPLICATE_IN_CITY
    assert await audit_entries(test_db) == []


@pytest.mark.asyncio
async def test_update_rolls_back_when_audit_write_fails(test_db, command_context, test_restaurants, monkeypatch):
    target = test_restaurants[1]
    monkeypatch.setattr(command_context.audit, "_write", failing_write)

    reply = await restaurants.update(command_context, str(target.id), name="Pronto Cafe")

    assert reply == messages.generic_error("updating the restaurant")
    assert await test_db.scalar(select(Restaurant.name).where(Restaurant.id == target.id)) == "Pronto"
    assert await audit_entries(test_db) == []


@pytest.mark.asyncio
async def test_delete_unknown_restaurant(command_context):
    assert await restaurants.delete(command_context, str(uuid.uuid4())) == messages.NOT_FOUND


@pytest.mark.asyncio
async def test_delete_keeps_restaurant_when_audit_write_fails(test_db, command_context, test_restaurants, monkeypatch):
    target = test_restaurants[0]
    monkeypatch.setattr(command_context.audit, "_write", failing_write)

    reply = await restaurants.delete(command_context, str(target.id))

    assert reply == messages.generic_error("deleting the restaurant")
    assert await find(test_db, "Zamn", City.RAMALLAH) is not None
    assert await audit_entries(test_db) == []


@pytest.mark.asyncio
async def test_delete_failure_discards_delete_entry(test_db, command_context, test_restaurants, monkeypatch):
    """Test the Delete entry written first is rolled back when the row removal fails"""
    target = test_restaurants[0]

    async def failing_delete(restaurant_id):
        raise RuntimeError("connection lost")

    monkeypatch.setattr(command_context.restaurants, "delete_restaurant", failing_delete)

    reply = await restaurants.delete(command_context, str(target.id))

    assert reply == messages.generic_error("deleting the restaurant")
    assert await find(test_db, "Zamn", City.RAMALLAH) is not None
    assert await audit_entries(test_db) == []


@pytest.mark.asyncio
async def test_upsert_creates_then_updates_url(test_db, command_context):
    """Test upsert creates first, then changes the URL of the same restaurant"""
    await restaurants.upsert(command_context, "Pronto", "-r")
    reply = await restaurants.upsert(command_context, "Pronto", "-r", "https://pronto.ps")

    assert reply.startswith("✅ **Restaurant saved successfully!**")
    assert await test_db.scalar(select(func.count(Restaurant.id))) == 1

    restaurant = await find(test_db, "Pronto", City.RAMALLAH)
    assert restaurant.url == "https://pronto.ps"

    entries = await audit_entries(test_db, restaurant.id)
    assert [e.action for e in entries] == [AuditAction.CREATE, AuditAction.UPDATE]
    assert entries[1].change_description == "Updated restaurant 'Pronto': URL: (none) → https://pronto.ps"


@pytest.mark.asyncio
async def test_upsert_create_collides_with_concurrent_create(test_db, command_context, test_restaurants, monkeypatch):
    """Test a same-name row committed after the lookup yields the duplicate reply and no entry"""
    async def committed_after_lookup(name, city):
        return None

    monkeypatch.setattr(command_context.restaurants, "find_restaurant", committed_after_lookup)

    reply = await restaurants.upsert(command_context, "Zamn", "-r", "https://zamn.ps/menu")

    assert reply == messages.duplicate_name("Zamn")
    assert await audit_entries(test_db) == []
    assert await test_db.scalar(select(func.count(Restaurant.id))) == len(test_restaurants)
    assert await test_db.scalar(
        select(Restaurant.url).where(Restaurant.name == "Zamn", Restaurant.city == City.RAMALLAH)
    ) == "https://zamn.ps"


@pytest.mark.asyncio
async def test_suggest(command_context, test_restaurants):
    reply = await restaurants.suggest(command_context, "-n")

    assert reply.startswith("🍽️ **Restaurant Suggestion for Nablus**")
    assert "Abu Salha" in reply or "Pizza Inn" in reply


@pytest.mark.asyncio
async def test_suggest_empty_city(command_context):
    reply = await restaurants.suggest(command_context, "n")

    assert "No restaurants found in **Nablus**" in reply


@pytest.mark.asyncio
async def test_order_opens_thread(command_context, fake_discord, test_restaurants):
    """Test ordering opens a thread named after the restaurant and posts the prompt"""
    target = test_restaurants[0]

    reply = await restaurants.order(command_context, str(target.id))

    assert "Order thread created successfully" in reply
    assert "<#910000000000000001>" in reply
    assert fake_discord.threads == [(command_context.channel_id, "Zamn")]

    thread_id, content = fake_discord.messages[0]
    assert thread_id == "910000000000000001"
    assert "We would like to order from Zamn" in content
    assert "https://zamn.ps" in content
    assert "Ramallah" in content


@pytest.mark.asyncio
async def test_order_outside_text_channel(command_context, fake_discord, test_restaurants):
    command_context.channel_type = ChannelType.DM

    reply = await restaurants.order(command_context, str(test_restaurants[0].id))

    assert reply == messages.INVALID_CHANNEL
    assert fake_discord.threads == []


@pytest.mark.asyncio
async def test_list_restaurants(command_context, test_restaurants):
    reply = await restaurants.list_restaurants(command_context, "-r")

    assert "Restaurants in Ramallah" in reply
    assert reply.index("Pizza House") < reply.index("Pronto") < reply.index("Zamn")
    assert "Abu Salha" not in reply


@pytest.mark.asyncio
async def test_list_restaurants_bad_page(command_context, test_restaurants):
    assert await restaurants.list_restaurants(command_context, "-r", "abc") == messages.INVALID_PAGE
    assert await restaurants.list_restaurants(command_context, "-r", "0") == messages.INVALID_PAGE


@pytest.mark.asyncio
async def test_search(command_context, test_restaurants):
    reply = await restaurants.search(command_context, "Pizza", "-n")

    assert "Pizza Inn" in reply
    assert "Pizza House" not in reply


@pytest.mark.asyncio
async def test_search_blank_name(command_context, test_restaurants):
    reply = await restaurants.search(command_context, " ", "-n")

    assert reply == "❌ Restaurant name cannot be null or empty."


@pytest.mark.asyncio
async def test_logs_command(command_context):
    await restaurants.add(command_context, "Zamn", "-r")
    await restaurants.add(command_context, "Pronto", "-r")

    reply = await history.logs(command_context)

    assert "Recent changes" in reply
    assert reply.index("Pronto") < reply.index("Zamn")
    assert "**Create** by tester" in reply


@pytest.mark.asyncio
async def test_logs_empty_page(command_context):
    assert await history.logs(command_context, "3") == "📜 No changes recorded on page 3."


@pytest.mark.asyncio
async def test_ask(command_context, fake_text_provider):
    reply = await general.ask(command_context, "  where should we eat?  ")

    assert reply == "Try the falafel."
    assert fake_text_provider.prompts == ["where should we eat?"]


@pytest.mark.asyncio
async def test_ask_blank_prompt(command_context):
    assert await general.ask(command_context, "") == messages.EMPTY_PROMPT


@pytest.mark.asyncio
async def test_ask_service_failure(command_context):
    class FailingProvider:
        async def generate_response(self, prompt):
            raise AIServiceError("AI service request timed out. Please try again.")

    command_context.text_provider = FailingProvider()

    assert await general.ask(command_context, "hi") == "❌ AI service request timed out. Please try again."


@pytest.mark.asyncio
async def test_echo(command_context):
    assert await general.echo(command_context, "hello") == "hello"
    assert await general.echo(command_context, "   ") == messages.ECHO_USAGE


@pytest.mark.asyncio
async def test_autocomplete_choices(command_context, test_restaurants):
    assert await restaurant_choices(command_context.restaurants, "P") == []

    choices = await restaurant_choices(command_context.restaurants, "Pizza")

    assert choices == [
        {"name": "Pizza House — Ramallah", "value": str(test_restaurants[2].id)},
        {"name": "Pizza Inn — Nablus", "value": str(test_restaurants[4].id)},
    ]


@pytest.mark.asyncio
async def test_run_command_dispatch(command_context):
    options = {"text": "ping"}

    assert await run_command(command_context, "echo", options.get) == "ping"
    assert await run_command(command_context, "dance", options.get) == messages.UNKNOWN_COMMAND


def test_every_registered_command_has_a_handler():
    from app.discord.commands import COMMANDS

    assert {c["name"] for c in COMMANDS} == set(HANDLERS)


@pytest.mark.asyncio
async def test_restaurant_lifecycle(test_db, command_context):
    """Test create, move and delete leave the full history behind"""
    reply = await restaurants.add(command_context, "Joe's", "-r")
    assert reply.startswith("✅")

    joes = await find(test_db, "Joe's", City.RAMALLAH)
    restaurant_id = joes.id

    entries = await audit_entries(test_db, restaurant_id)
    assert len(entries) == 1
    assert entries[0].change_description == "Created restaurant 'Joe's' in Ramallah"

    reply = await restaurants.update(command_context, str(restaurant_id), city="-n")
    assert "Nablus" in reply

    entries = await audit_entries(test_db, restaurant_id)
    assert len(entries) == 2
    assert "City: Ramallah → Nablus" in entries[1].change_description

    reply = await restaurants.delete(command_context, str(restaurant_id))
    assert reply == "✅ Successfully deleted **Joe's** from **Nablus**."

    with pytest.raises(NotFoundError):
        await command_context.restaurants.get_restaurant_by_id(restaurant_id)

    entries = await command_context.audit.get_history(restaurant_id)
    assert [e.action for e in entries] == [AuditAction.DELETE, AuditAction.UPDATE, AuditAction.CREATE]

    reply = await history.history(command_context, str(restaurant_id))
    assert reply.index("**Delete**") < reply.index("**Update**") < reply.index("**Create**")
