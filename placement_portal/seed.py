"""
Create (or reset) the admin account.

There is no public admin signup; run this once against a fresh database:

    python -m placement_portal.seed --email admin@example.com --password secret123
"""

import argparse
import asyncio
import logging
import os
from datetime import datetime

from placement_portal import database
from placement_portal.utils.security import get_password_hash

logger = logging.getLogger(__name__)


async def seed_admin(db, email: str, password: str, name: str) -> bool:
    """Upsert the admin; returns True when a new account was created."""
    now = datetime.utcnow()
    result = await db.admins.update_one(
        {"email": email.lower()},
        {
            "$set": {"password": get_password_hash(password), "name": name, "updated_at": now},
            "$setOnInsert": {"role": "admin", "created_at": now}
        },
        upsert=True
    )
    return result.upserted_id is not None


async def run(args):
    await database.connect_to_mongo()
    try:
        created = await seed_admin(database.get_db(), args.email, args.password, args.name)
        logger.info(f"{'Created' if created else 'Updated'} admin {args.email.lower()}")
    finally:
        await database.close_mongo_connection()


def main():
    logging.basicConfig(level=logging.INFO)

    parser = argparse.ArgumentParser(description="Create the placement portal admin account")
    parser.add_argument("--email", default=os.getenv("ADMIN_EMAIL"))
    parser.add_argument("--password", default=os.getenv("ADMIN_PASSWORD"))
    parser.add_argument("--name", default="System Administrator")
    args = parser.parse_args()

    if not args.email or not args.password:
        parser.error("--email and --password (or ADMIN_EMAIL / ADMIN_PASSWORD) are required")
    if len(args.password) < 6:
        parser.error("password must be at least 6 characters")

    asyncio.run(run(args))


if __name__ == "__main__":
    main()
