"""Slash command definitions registered with Discord"""

STRING = 3
INTEGER = 4

CITY_HELP = "City: -r/R for Ramallah, -n/N for Nablus"


def _option(name: str, description: str, type_: int = STRING, required: bool = True, **extra) -> dict:
    option = {"name": name, "description": description, "type": type_, "required": required}
    option.update(extra)
    return option


def _restaurant_option(description: str) -> dict:
    return _option("restaurant", description, autocomplete=True)


COMMANDS = [
    {
        "name": "add",
        "description": "Add a new restaurant",
        "options": [
            _option("name", "Restaurant name"),
            _option("city", CITY_HELP),
            _option("url", "Optional restaurant URL", required=False),
        ],
    },
    {
        "name": "update",
        "description": "Update an existing restaurant",
        "options": [
            _restaurant_option("Select restaurant to update"),
            _option("name", "New restaurant name (leave empty to keep current)", required=False),
            _option("city", "New city: -r/R for Ramallah, -n/N for Nablus (leave empty to keep current)", required=False),
            _option("url", "New restaurant URL (leave empty to keep current, use 'remove' to delete)", required=False),
        ],
    },
    {
        "name": "delete",
        "description": "Delete a restaurant from the database",
        "options": [_restaurant_option("Select the restaurant to delete")],
    },
    {
        "name": "upsert",
        "description": "Create or update a restaurant",
        "options": [
            _option("name", "Restaurant name"),
            _option("city", CITY_HELP),
            _option("url", "Optional restaurant URL", required=False),
        ],
    },
    {
        "name": "suggest",
        "description": "Get a random restaurant suggestion from a specific city",
        "options": [_option("city", "City to get suggestion from: -r/R for Ramallah, -n/N for Nablus")],
    },
    {
        "name": "order",
        "description": "Create an order thread for a restaurant",
        "options": [_restaurant_option("Select a restaurant to order from")],
    },
    {
        "name": "list",
        "description": "List restaurants in a city",
        "options": [
            _option("city", CITY_HELP),
            _option("page", "Page number (default 1)", type_=INTEGER, required=False, min_value=1),
        ],
    },
    {
        "name": "search",
        "description": "Search restaurants by name in a city",
        "options": [
            _option("name", "Part of the restaurant name"),
            _option("city", CITY_HELP),
            _option("page", "Page number (default 1)", type_=INTEGER, required=False, min_value=1),
        ],
    },
    {
        "name": "history",
        "description": "Show the change history of a restaurant",
        "options": [_restaurant_option("Select a restaurant")],
    },
    {
        "name": "logs",
        "description": "Show recent restaurant changes",
        "options": [
            _option("page", "Page number (default 1)", type_=INTEGER, required=False, min_value=1),
        ],
    },
    {
        "name": "ask",
        "description": "Ask the AI assistant",
        "options": [_option("prompt", "What do you want to ask?")],
    },
    {
        "name": "echo",
        "description": "Echoes back the provided text",
        "options": [_option("text", "Text to echo")],
    },
]
