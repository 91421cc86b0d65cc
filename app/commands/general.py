"""Utility commands: ask, echo"""

from typing import Optional
import structlog

from app.commands import messages
from app.commands.context import CommandContext
from app.errors import AIServiceError

logger = structlog.get_logger()


async def ask(ctx: CommandContext, prompt: Optional[str]) -> str:
    """Forward a prompt to the text generation service"""
    logger.info("Ask command invoked", user=ctx.actor.name, prompt_length=len(prompt or ""))

    if not prompt or not prompt.strip():
        return messages.EMPTY_PROMPT
    if ctx.text_provider is None:
        return messages.generic_error("contacting the AI service")

    try:
        answer = await ctx.text_provider.generate_response(prompt.strip())
    except AIServiceError as e:
        return f"❌ {e}"

    return answer[: messages.MAX_MESSAGE_LENGTH]


async def echo(ctx: CommandContext, text: Optional[str]) -> str:
    if not text or not text.strip():
        return messages.ECHO_USAGE
    return text
