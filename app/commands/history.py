"""Audit trail commands: history, logs"""

from typing import List, Optional
import structlog

from app.commands import messages
from app.commands.context import CommandContext
from app.commands.restaurants import parse_page
from app.config import settings
from app.errors import InvalidArgumentError
from app.models.audit import RestaurantAuditLog
from app.validation import parse_restaurant_id

logger = structlog.get_logger()

ACTION_ICONS = {
    "Create": "🆕",
    "Update": "✏️",
    "Delete": "🗑️",
}


def format_entry(entry: RestaurantAuditLog) -> str:
    label = entry.action.label
    icon = ACTION_ICONS.get(label, "•")
    when = entry.timestamp.strftime("%Y-%m-%d %H:%M")
    return f"{icon} `{when} UTC` **{label}** by {entry.actor_name}: {entry.change_description or ''}"


def _render(entries: List[RestaurantAuditLog], header: str) -> str:
    return messages.fit([format_entry(e) for e in entries], header=header)


async def history(ctx: CommandContext, restaurant: Optional[str]) -> str:
    """Change history of one restaurant, newest first"""
    logger.info("History command invoked", user=ctx.actor.name, restaurant_id=restaurant)

    restaurant_id = parse_restaurant_id(restaurant)
    if restaurant_id is None:
        return messages.INVALID_RESTAURANT

    try:
        entries = await ctx.audit.get_history(restaurant_id)
    except Exception:
        logger.error("Error fetching audit history", restaurant_id=str(restaurant_id), exc_info=True)
        return messages.generic_error("fetching the history")

    if not entries:
        return "📜 No history found for this restaurant."

    return _render(entries, header="📜 **Restaurant history**\n")


async def logs(ctx: CommandContext, page: Optional[str] = None) -> str:
    """Recent changes across all restaurants"""
    logger.info("Logs command invoked", user=ctx.actor.name, page=page)

    page_number = parse_page(page)
    if page_number is None:
        return messages.INVALID_PAGE

    try:
        entries = await ctx.audit.get_all_logs(settings.default_page_size, page_number)
    except InvalidArgumentError:
        return messages.INVALID_PAGE
    except Exception:
        logger.error("Error fetching audit logs", page=page, exc_info=True)
        return messages.generic_error("fetching the change log")

    if not entries:
        return f"📜 No changes recorded on page {page_number}."

    return _render(entries, header=f"📜 **Recent changes** (page {page_number})\n")
