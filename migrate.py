#!/usr/bin/env python3
"""
Database management script.
Creates, drops and resets the schema and seeds demo users, spots, images and reviews.
"""

import asyncio
import sys
import argparse
import logging
from decimal import Decimal
from pathlib import Path

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

# Add the app directory to the Python path
sys.path.insert(0, str(Path(__file__).parent))

from app.config import settings
from app.database import AsyncSessionLocal, create_tables, drop_tables
from app.models import User, Spot, SpotImage, Review, ReviewImage

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


DEMO_PASSWORD = "password"

DEMO_USERS = [
    {"first_name": "Demo", "last_name": "User", "email": "demo@user.io", "username": "Demo-lition"},
    {"first_name": "Fake", "last_name": "Host", "email": "host1@user.io", "username": "FakeHost1"},
    {"first_name": "Other", "last_name": "Guest", "email": "guest2@user.io", "username": "FakeGuest2"},
]

DEMO_SPOTS = [
    {
        "owner": "FakeHost1",
        "address": "123 Disney Lane",
        "city": "San Francisco",
        "state": "California",
        "country": "United States of America",
        "lat": Decimal("37.7645358"),
        "lng": Decimal("-122.4730327"),
        "name": "App Academy",
        "description": "Place where web developers are created",
        "price": Decimal("123"),
        "images": [
            ("https://example.com/images/app-academy-front.jpg", True),
            ("https://example.com/images/app-academy-lobby.jpg", False),
        ],
    },
    {
        "owner": "FakeHost1",
        "address": "742 Evergreen Terrace",
        "city": "Springfield",
        "state": "Oregon",
        "country": "United States of America",
        "lat": Decimal("44.0462362"),
        "lng": Decimal("-123.0220289"),
        "name": "Family Home",
        "description": "Quiet suburban house with a big back yard",
        "price": Decimal("89.50"),
        "images": [],
    },
    {
        "owner": "Demo-lition",
        "address": "1 Harbour View",
        "city": "Seattle",
        "state": "Washington",
        "country": "United States of America",
        "lat": Decimal("47.6062095"),
        "lng": Decimal("-122.3320708"),
        "name": "Waterfront Loft",
        "description": "Open plan loft overlooking the sound",
        "price": Decimal("245"),
        "images": [
            ("https://example.com/images/loft.jpg", True),
        ],
    },
]

DEMO_REVIEWS = [
    ("Demo-lition", "App Academy", "Great place to learn, would stay again.", 5.0,
     ["https://example.com/images/review-classroom.jpg"]),
    ("FakeGuest2", "App Academy", "Busy but friendly.", 4.0, []),
    ("FakeGuest2", "Waterfront Loft", "Amazing view, a bit noisy at night.", 3.5, []),
]


async def seed_demo_data(session: AsyncSession) -> bool:
    """
    Insert the demo data set.

    Returns:
        False if the demo user already exists and nothing was inserted
    """
    result = await session.execute(select(User).where(User.username == DEMO_USERS[0]["username"]))
    if result.scalar_one_or_none():
        logger.info("Demo user already exists, skipping seed")
        return False

    users = {}
    for user_data in DEMO_USERS:
        user = User(**user_data, hashed_password=User.hash_password(DEMO_PASSWORD))
        session.add(user)
        users[user.username] = user
    await session.flush()

    spots = {}
    for spot_data in DEMO_SPOTS:
        spot_fields = {k: v for k, v in spot_data.items() if k not in ("owner", "images")}
        spot = Spot(**spot_fields, owner_id=users[spot_data["owner"]].id)
        spot.validate_coordinates()
        session.add(spot)
        spots[spot.name] = (spot, spot_data["images"])
    await session.flush()

    for spot, images in spots.values():
        for url, preview in images:
            session.add(SpotImage(spot_id=spot.id, url=url, preview=preview))

    for username, spot_name, text, stars, image_urls in DEMO_REVIEWS:
        review = Review(user_id=users[username].id, spot_id=spots[spot_name][0].id, review=text, stars=stars)
        session.add(review)
        await session.flush()
        for url in image_urls:
            session.add(ReviewImage(review_id=review.id, url=url))

    await session.commit()
    logger.info(
        f"Seeded {len(DEMO_USERS)} users, {len(DEMO_SPOTS)} spots and {len(DEMO_REVIEWS)} reviews"
    )
    return True


class MigrationManager:
    """Manages the database schema and demo data."""

    async def create(self) -> None:
        await create_tables()

    async def drop(self) -> None:
        await drop_tables()

    async def seed(self) -> None:
        """Seed the database with demo data."""
        logger.info("Seeding database with demo data")

        async with AsyncSessionLocal() as session:
            try:
                if await seed_demo_data(session):
                    logger.info(f"Demo login: {DEMO_USERS[0]['username']} / {DEMO_PASSWORD}")
            except Exception as e:
                await session.rollback()
                logger.error(f"Failed to seed database: {e}")
                raise

    async def reset(self) -> None:
        """Reset the database by dropping and recreating all tables, then seed it."""
        logger.warning("Resetting database - all data will be lost!")

        if settings.is_production:
            raise RuntimeError("Database reset is not allowed in production")

        await drop_tables()
        await create_tables()
        await self.seed()

        logger.info("Database reset completed")


def main():
    """Main CLI interface for database management."""
    parser = argparse.ArgumentParser(description="Database management for the Spot Booking API")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("create", help="Create all tables")
    subparsers.add_parser("drop", help="Drop all tables (not in production)")
    subparsers.add_parser("seed", help="Seed database with demo data")

    reset_parser = subparsers.add_parser("reset", help="Drop, recreate and seed (not in production)")
    reset_parser.add_argument("--confirm", action="store_true", help="Confirm database reset")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    manager = MigrationManager()

    try:
        if args.command == "create":
            asyncio.run(manager.create())

        elif args.command == "drop":
            asyncio.run(manager.drop())

        elif args.command == "seed":
            asyncio.run(manager.seed())

        elif args.command == "reset":
            if not args.confirm:
                print("Database reset requires --confirm flag")
                return
            asyncio.run(manager.reset())

    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
