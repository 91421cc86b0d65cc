"""Audit service: append-only change log for restaurant mutations.

Writes are flushed into the caller's transaction and never updated or
deleted afterwards.
"""

from typing import Dict, List, Optional, Tuple, Union
from uuid import UUID
import structlog

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit import AuditAction, RestaurantAuditLog, utcnow
from app.models.restaurant import Restaurant
from app.pagination import page_offset
from app.schemas.restaurant import RestaurantSnapshot

logger = structlog.get_logger()

NO_URL = "(none)"
REMOVED_URL = "(removed)"

RestaurantLike = Union[Restaurant, RestaurantSnapshot]


def _snapshot(restaurant: RestaurantLike) -> RestaurantSnapshot:
    return RestaurantSnapshot.model_validate(restaurant)


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def diff_snapshots(
    old: RestaurantSnapshot,
    new: RestaurantSnapshot,
) -> Tuple[List[str], Dict[str, Dict[str, Optional[str]]]]:
    """
    Compare the tracked fields (name, city, url).

    Returns the human-readable change list and the structured
    {field: {"old", "new"}} mapping; both empty when nothing changed.
    """
    changes: List[str] = []
    details: Dict[str, Dict[str, Optional[str]]] = {}

    if old.name != new.name:
        changes.append(f"Name: '{old.name}' → '{new.name}'")
        details["name"] = {"old": old.name, "new": new.name}

    if old.city != new.city:
        changes.append(f"City: {old.city.value} → {new.city.value}")
        details["city"] = {"old": old.city.value, "new": new.city.value}

    old_url = None if _blank(old.url) else old.url
    new_url = None if _blank(new.url) else new.url
    if old_url != new_url:
        changes.append(f"URL: {old_url or NO_URL} → {new_url or REMOVED_URL}")
        details["url"] = {"old": old_url, "new": new_url}

    return changes, details


class AuditService:
    """Records and reads restaurant audit entries"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _write(
        self,
        restaurant_id: UUID,
        action: AuditAction,
        actor_name: str,
        actor_id: int,
        change_details: dict,
        change_description: str,
    ) -> RestaurantAuditLog:
        entry = RestaurantAuditLog(
            restaurant_id=restaurant_id,
            action=action,
            timestamp=utcnow(),
            actor_name=actor_name,
            actor_id=actor_id,
            change_details=change_details,
            change_description=change_description,
        )
        self.db.add(entry)
        await self.db.flush()
        return entry

    async def log_create(
        self,
        restaurant: RestaurantLike,
        actor_name: str,
        actor_id: int,
    ) -> RestaurantAuditLog:
        """Record a creation with the full snapshot"""
        snapshot = _snapshot(restaurant)
        logger.info("Logging create action", restaurant_name=snapshot.name, actor=actor_name)

        description = f"Created restaurant '{snapshot.name}' in {snapshot.city.value}"
        if not _blank(snapshot.url):
            description += f" with URL: {snapshot.url}"

        entry = await self._write(
            snapshot.id,
            AuditAction.CREATE,
            actor_name,
            actor_id,
            snapshot.as_details(),
            description,
        )
        logger.info("Logged create action", restaurant_id=str(snapshot.id))
        return entry

    async def log_update(
        self,
        restaurant_id: UUID,
        old: RestaurantLike,
        new: RestaurantLike,
        actor_name: str,
        actor_id: int,
    ) -> Optional[RestaurantAuditLog]:
        """Record the changed fields; writes nothing when nothing changed"""
        logger.info("Logging update action", restaurant_id=str(restaurant_id), actor=actor_name)

        old_snapshot = _snapshot(old)
        changes, details = diff_snapshots(old_snapshot, _snapshot(new))

        if not changes:
            logger.warning("No changes detected", restaurant_id=str(restaurant_id))
            return None

        entry = await self._write(
            restaurant_id,
            AuditAction.UPDATE,
            actor_name,
            actor_id,
            details,
            f"Updated restaurant '{old_snapshot.name}': {', '.join(changes)}",
        )
        logger.info("Logged update action", restaurant_id=str(restaurant_id), change_count=len(changes))
        return entry

    async def log_delete(
        self,
        restaurant: RestaurantLike,
        actor_name: str,
        actor_id: int,
    ) -> RestaurantAuditLog:
        """Record a deletion with the pre-delete snapshot"""
        snapshot = _snapshot(restaurant)
        logger.info("Logging delete action", restaurant_name=snapshot.name, actor=actor_name)

        entry = await self._write(
            snapshot.id,
            AuditAction.DELETE,
            actor_name,
            actor_id,
            snapshot.as_details(),
            f"Deleted restaurant '{snapshot.name}' from {snapshot.city.value}",
        )
        logger.info("Logged delete action", restaurant_id=str(snapshot.id))
        return entry

    async def get_history(self, restaurant_id: UUID) -> List[RestaurantAuditLog]:
        """All entries for one restaurant, newest first; ties fall back to write order"""
        logger.info("Retrieving audit history", restaurant_id=str(restaurant_id))

        result = await self.db.execute(
            select(RestaurantAuditLog)
            .where(RestaurantAuditLog.restaurant_id == restaurant_id)
            .order_by(RestaurantAuditLog.timestamp.desc(), RestaurantAuditLog.id.desc())
        )
        return list(result.scalars().all())

    async def get_all_logs(self, page_size: int, page_number: int = 1) -> List[RestaurantAuditLog]:
        """Entries across all restaurants, newest first, one page at a time"""
        offset = page_offset(page_size, page_number)
        logger.info("Retrieving audit logs", page_number=page_number, page_size=page_size)

        result = await self.db.execute(
            select(RestaurantAuditLog)
            .order_by(RestaurantAuditLog.timestamp.desc(), RestaurantAuditLog.id.desc())
            .offset(offset)
            .limit(page_size)
        )
        return list(result.scalars().all())
