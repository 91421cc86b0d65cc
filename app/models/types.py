"""Custom column types"""

import enum
from decimal import Decimal
from typing import Optional, Type

from sqlalchemy import Numeric, SmallInteger, String
from sqlalchemy.types import TypeDecorator


class Snowflake(TypeDecorator):
    """
    Unsigned 64-bit platform identifier.

    Stored as NUMERIC(20, 0). SQLite has no exact 20-digit numeric, so the
    value is kept as text there to avoid float rounding.
    """

    impl = Numeric(20, 0)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(20))
        return dialect.type_descriptor(Numeric(20, 0))

    def process_bind_param(self, value: Optional[int], dialect):
        if value is None:
            return None
        if dialect.name == "sqlite":
            return str(int(value))
        return Decimal(int(value))

    def process_result_value(self, value, dialect) -> Optional[int]:
        if value is None:
            return None
        return int(value)


class IntEnumCode(TypeDecorator):
    """Stores an IntEnum as its small integer code"""

    impl = SmallInteger
    cache_ok = True

    def __init__(self, enum_class: Type[enum.IntEnum], *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.enum_class = enum_class

    def process_bind_param(self, value, dialect) -> Optional[int]:
        if value is None:
            return None
        return int(self.enum_class(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return self.enum_class(value)
