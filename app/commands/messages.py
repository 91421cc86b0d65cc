"""User-facing reply texts"""

from app.models.restaurant import Restaurant

# Discord rejects message content above this length
MAX_MESSAGE_LENGTH = 2000

EMPTY_NAME = "❌ Restaurant name cannot be empty."
INVALID_CITY = (
    "❌ Invalid city option. Please use:\n"
    "• **-r** or **R** for Ramallah\n"
    "• **-n** or **N** for Nablus"
)
INVALID_URL = "❌ Invalid URL format. Please provide a valid HTTP or HTTPS URL."
INVALID_URL_OR_REMOVE = (
    "❌ Invalid URL format. Please provide a valid HTTP or HTTPS URL, or use 'remove' to delete the URL."
)
INVALID_RESTAURANT = "❌ Invalid restaurant selected. Please select a restaurant from the autocomplete suggestions."
INVALID_PAGE = "❌ Page number must be a whole number greater than 0."
INVALID_CHANNEL = "❌ This command can only be used in text channels."
NO_CHANGES = "❌ No changes were provided. Please specify at least one field to update."
NOT_FOUND = "❌ Restaurant not found. It may have already been deleted or changed."
DUPLICATE_IN_CITY = "❌ A restaurant with this name already exists in the specified city."
EMPTY_PROMPT = "❌ Please provide a prompt."
ECHO_USAGE = "Usage: /echo <text>"
UNKNOWN_COMMAND = "❌ Unknown command."


def generic_error(action: str) -> str:
    return f"❌ An error occurred while {action}. Please try again later."


def duplicate_name(name: str) -> str:
    return (
        f"❌ A restaurant with the name **{name}** already exists in this city. "
        "Use `/update` to modify it instead."
    )


def restaurant_card(title: str, restaurant: Restaurant) -> str:
    message = (
        f"✅ **{title}**\n\n"
        f"📍 **Name:** {restaurant.name}\n"
        f"🏙️ **City:** {restaurant.city.value}"
    )
    if restaurant.url:
        message += f"\n🔗 **URL:** {restaurant.url}"
    return message


def fit(lines, header: str = "") -> str:
    """Join lines under a header, dropping trailing lines that would overflow"""
    text = header
    for index, line in enumerate(lines):
        candidate = f"{text}\n{line}" if text else line
        if len(candidate) > MAX_MESSAGE_LENGTH - 20:
            remaining = len(lines) - index
            return f"{text}\n… and {remaining} more"
        text = candidate
    return text
