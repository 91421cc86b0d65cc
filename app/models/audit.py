"""Audit log model"""

import enum
from datetime import datetime, timezone
from sqlalchemy import BigInteger, Column, Integer, String, DateTime, JSON, Text
from sqlalchemy.dialects.postgresql import UUID

from app.database import Base
from app.models.types import IntEnumCode, Snowflake


class AuditAction(enum.IntEnum):
    """Mutation kinds, stored as small integer codes"""
    CREATE = 0
    UPDATE = 1
    DELETE = 2

    @property
    def label(self) -> str:
        return self.name.capitalize()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RestaurantAuditLog(Base):
    """
    Append-only record of one restaurant mutation.

    restaurant_id has no foreign key: entries outlive the
    restaurant they describe. id increases with insertion order and
    breaks ties between entries written within the same clock tick.
    """
    __tablename__ = "restaurant_audit_logs"

    # SQLite only autoincrements INTEGER PRIMARY KEY
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    restaurant_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    action = Column(IntEnumCode(AuditAction), nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    # Actor information, captured at write time
    actor_name = Column(String(255), nullable=False)
    actor_id = Column(Snowflake(), nullable=False)

    # Change data
    change_details = Column(JSON)  # snapshot for create/delete, {"field": {"old", "new"}} for update
    change_description = Column(Text)
