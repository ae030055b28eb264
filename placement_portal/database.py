import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorGridFSBucket
from pymongo import ASCENDING

from placement_portal.services.mongo_store import MongoPlacementStore

logger = logging.getLogger(__name__)

# .env lives next to the package directory
env_path = Path(__file__).resolve().parent.parent / ".env"
if env_path.exists():
    load_dotenv(dotenv_path=env_path)
else:
    load_dotenv()

MONGO_URI = os.getenv("MONGO_URI")
DATABASE_NAME = os.getenv("DATABASE_NAME", "placement_portal")

client = None
db = None
fs_bucket = None


async def connect_to_mongo():
    global client, db, fs_bucket

    if not MONGO_URI:
        raise ValueError("MONGO_URI environment variable is not set! Check your .env file.")

    client = AsyncIOMotorClient(MONGO_URI)
    db = client[DATABASE_NAME]
    fs_bucket = AsyncIOMotorGridFSBucket(db, bucket_name="resumes")
    await client.admin.command('ping')
    await ensure_indexes(db)

    logger.info(f"Connected to MongoDB database '{DATABASE_NAME}'")


async def ensure_indexes(database):
    """Create the unique and TTL indexes the portal relies on."""
    # one application per (job, student)
    await database.applications.create_index(
        [("job_id", ASCENDING), ("student_id", ASCENDING)], unique=True
    )
    await database.applications.create_index("student_id")

    for collection in ("admins", "colleges", "companies", "students"):
        await database[collection].create_index("email", unique=True)

    await database.students.create_index(
        [("college_id", ASCENDING), ("roll_number", ASCENDING)], unique=True
    )
    await database.jobs.create_index([("is_active", ASCENDING), ("application_deadline", ASCENDING)])
    await database.jobs.create_index("company_id")

    await database.email_verifications.create_index("token", unique=True)
    await database.email_verifications.create_index("expires_at", expireAfterSeconds=0)
    await database.password_resets.create_index("token", unique=True)
    await database.password_resets.create_index("expires_at", expireAfterSeconds=0)


async def close_mongo_connection():
    if client:
        client.close()


def get_fs_bucket():
    return fs_bucket


def get_db():
    return db


def get_store():
    """FastAPI dependency returning the placement store for this process."""
    return MongoPlacementStore(get_db())
