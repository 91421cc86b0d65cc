"""Command handlers and the name -> handler table"""

from typing import Awaitable, Callable, Dict, Optional, Sequence, Tuple
import structlog

from app.commands import general, history, restaurants
from app.commands.context import CommandContext
from app.commands.messages import UNKNOWN_COMMAND

logger = structlog.get_logger()

Handler = Callable[..., Awaitable[str]]

# command name -> (handler, option names in positional order)
HANDLERS: Dict[str, Tuple[Handler, Sequence[str]]] = {
    "add": (restaurants.add, ("name", "city", "url")),
    "update": (restaurants.update, ("restaurant", "name", "city", "url")),
    "delete": (restaurants.delete, ("restaurant",)),
    "upsert": (restaurants.upsert, ("name", "city", "url")),
    "suggest": (restaurants.suggest, ("city",)),
    "order": (restaurants.order, ("restaurant",)),
    "list": (restaurants.list_restaurants, ("city", "page")),
    "search": (restaurants.search, ("name", "city", "page")),
    "history": (history.history, ("restaurant",)),
    "logs": (history.logs, ("page",)),
    "ask": (general.ask, ("prompt",)),
    "echo": (general.echo, ("text",)),
}


async def run_command(
    ctx: CommandContext,
    name: str,
    option: Callable[[str], Optional[str]],
) -> str:
    """Look up and run a handler, reading its options through `option`"""
    entry = HANDLERS.get(name)
    if entry is None:
        logger.warning("Unknown command", command=name)
        return UNKNOWN_COMMAND

    handler, option_names = entry
    return await handler(ctx, *[option(opt) for opt in option_names])


__all__ = ["CommandContext", "HANDLERS", "run_command"]
