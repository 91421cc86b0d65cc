"""Error taxonomy shared by the store, services and command handlers"""


class BiteBotError(Exception):
    """Base class for every expected failure kind"""


class InvalidArgumentError(BiteBotError, ValueError):
    """Bad pagination or a blank required search term"""


class NotFoundError(BiteBotError, LookupError):
    """No restaurant matches the given id"""

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with ID '{entity_id}' was not found.")


class DuplicateKeyError(BiteBotError):
    """A restaurant with the same name already exists in the city"""

    def __init__(self, name: str, city):
        self.name = name
        self.city = city
        super().__init__(f"Restaurant '{name}' already exists in {getattr(city, 'value', city)}.")


class ValidationRejectedError(BiteBotError, ValueError):
    """User input (name, city code, URL) failed parsing before reaching the store"""

    def __init__(self, field: str, value):
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field}: {value!r}")


class AIServiceError(BiteBotError):
    """The text-generation service failed or timed out"""
