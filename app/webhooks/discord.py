"""Discord interactions webhook"""

from typing import Optional

import httpx
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
import structlog

from app.commands import CommandContext, run_command
from app.commands.autocomplete import restaurant_choices
from app.commands.messages import generic_error
from app.config import settings
from app.database import get_db, get_session_factory
from app.discord.client import DiscordAPIError, DiscordClient, get_discord_client
from app.discord.security import SIGNATURE_HEADER, TIMESTAMP_HEADER, verify_signature
from app.llm import BaseTextProvider, get_text_provider
from app.repositories.restaurant import RestaurantRepository
from app.schemas.discord import (
    EPHEMERAL_FLAG,
    Interaction,
    InteractionCallbackType,
    InteractionType,
)
from app.services.restaurant_service import RestaurantService

router = APIRouter()
logger = structlog.get_logger()


def get_public_key() -> str:
    """Application public key used to verify requests; overridden in tests"""
    return settings.discord_public_key


async def process_command(
    interaction: Interaction,
    session_factory: async_sessionmaker,
    discord: DiscordClient,
    text_provider: Optional[BaseTextProvider],
) -> None:
    """
    Run a deferred command with its own session and replace the
    'thinking' placeholder with the result.
    """
    name = interaction.data.name
    channel_type = interaction.channel.type if interaction.channel else None

    try:
        async with session_factory() as db:
            ctx = CommandContext(
                db=db,
                actor=interaction.actor,
                channel_id=interaction.channel_id,
                channel_type=channel_type,
                discord=discord,
                text_provider=text_provider,
            )
            content = await run_command(ctx, name, interaction.option)
    except Exception:
        logger.error("Unhandled command failure", command=name, exc_info=True)
        content = generic_error(f"running /{name}")

    try:
        await discord.edit_original_response(interaction.token, content)
    except (DiscordAPIError, httpx.HTTPError):
        logger.error(
            "Could not deliver command response",
            command=name,
            interaction_id=interaction.id,
            exc_info=True,
        )


async def _autocomplete(interaction: Interaction, db: AsyncSession) -> dict:
    focused = interaction.focused_option()
    user_input = "" if focused is None or focused.value is None else str(focused.value)

    try:
        choices = await restaurant_choices(RestaurantService(RestaurantRepository(db)), user_input)
    except Exception:
        logger.error("Autocomplete lookup failed", user_input=user_input, exc_info=True)
        choices = []

    return {
        "type": InteractionCallbackType.APPLICATION_COMMAND_AUTOCOMPLETE_RESULT.value,
        "data": {"choices": choices},
    }


@router.post("")
async def handle_interaction(
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker = Depends(get_session_factory),
    discord: DiscordClient = Depends(get_discord_client),
    text_provider: BaseTextProvider = Depends(get_text_provider),
    public_key: str = Depends(get_public_key),
):
    """
    Handle an interaction delivered by Discord.

    Commands are acknowledged immediately with a deferred ephemeral reply;
    the work runs after the response is sent.
    """
    body = await request.body()

    if not verify_signature(
        public_key,
        request.headers.get(SIGNATURE_HEADER),
        request.headers.get(TIMESTAMP_HEADER),
        body,
    ):
        logger.warning("Rejected interaction with invalid signature")
        raise HTTPException(status_code=401, detail="invalid request signature")

    try:
        interaction = Interaction.model_validate_json(body)
    except ValidationError as e:
        logger.warning("Malformed interaction payload", error=str(e))
        raise HTTPException(status_code=400, detail="malformed interaction")

    logger.info(
        "Interaction received",
        interaction_id=interaction.id,
        interaction_type=interaction.type.name,
        command=interaction.data.name if interaction.data else None,
    )

    if interaction.type == InteractionType.PING:
        return {"type": InteractionCallbackType.PONG.value}

    if interaction.type == InteractionType.APPLICATION_COMMAND_AUTOCOMPLETE:
        return await _autocomplete(interaction, db)

    if interaction.type == InteractionType.APPLICATION_COMMAND and interaction.data is not None:
        background_tasks.add_task(process_command, interaction, session_factory, discord, text_provider)
        return {
            "type": InteractionCallbackType.DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE.value,
            "data": {"flags": EPHEMERAL_FLAG},
        }

    raise HTTPException(status_code=400, detail="unsupported interaction type")
