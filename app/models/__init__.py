"""Database models"""

from app.models.restaurant import City, Restaurant
from app.models.audit import AuditAction, RestaurantAuditLog

__all__ = [
    "City",
    "Restaurant",
    "AuditAction",
    "RestaurantAuditLog",
]
