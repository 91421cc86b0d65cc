#!/usr/bin/env python3
"""
Seed script to create demo restaurants in both cities
"""

import asyncio
import uuid

SYSTEM_ACTOR_NAME = "seed"
SYSTEM_ACTOR_ID = 0


async def seed_demo_data():
    """Seed demo data for development"""
    from app.database import SessionLocal, engine, Base, transaction
    from app.models.restaurant import City, Restaurant
    from app.repositories.restaurant import RestaurantRepository
    from app.services.audit_service import AuditService
    from app.services.restaurant_service import RestaurantService

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    restaurants = [
        # Ramallah
        {"name": "Zamn", "city": City.RAMALLAH, "url": "https://zamn.ps"},
        {"name": "Rukab Ice Cream", "city": City.RAMALLAH, "url": None},
        {"name": "Abu Iskandar", "city": City.RAMALLAH, "url": "https://abuiskandar.ps/menu"},
        {"name": "Pronto", "city": City.RAMALLAH, "url": None},
        {"name": "Darna", "city": City.RAMALLAH, "url": "https://darna.ps"},

        # Nablus
        {"name": "Al Aqsa Sweets", "city": City.NABLUS, "url": None},
        {"name": "Abu Salha", "city": City.NABLUS, "url": "https://abusalha.ps"},
        {"name": "Zeit w Zaatar", "city": City.NABLUS, "url": None},
        {"name": "Yaffa Cafe", "city": City.NABLUS, "url": "https://yaffacafe.ps"},
    ]

    async with SessionLocal() as db:
        service = RestaurantService(RestaurantRepository(db))
        audit = AuditService(db)

        created = 0
        for data in restaurants:
            existing = await service.find_restaurant(data["name"], data["city"])
            if existing:
                print(f"Skipping {data['name']} ({data['city'].value}): already exists")
                continue

            async with transaction(db):
                restaurant = await service.upsert_restaurant(
                    Restaurant(id=uuid.uuid4(), name=data["name"], city=data["city"], url=data["url"])
                )
                await audit.log_create(restaurant, SYSTEM_ACTOR_NAME, SYSTEM_ACTOR_ID)
            created += 1

    print(f"""
Demo data created successfully!

Restaurants: {created} created, {len(restaurants) - created} already present
Cities: {", ".join(c.value for c in City)}

Each new restaurant has a Create entry in the audit log attributed to '{SYSTEM_ACTOR_NAME}'.
""")


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
