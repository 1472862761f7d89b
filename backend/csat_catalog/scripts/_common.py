"""Shared setup for the maintenance commands."""

import logging
import sys
from contextlib import asynccontextmanager

from motor.motor_asyncio import AsyncIOMotorClient

from ..config.settings import configure_logging, settings
from ..errors import ConfigurationMissing
from ..storage import DocumentRepository, S3ObjectStore, SubmissionRepository, create_s3_client

logger = logging.getLogger(__name__)


def bootstrap(require_object_store: bool = True):
    """Configure logging and validate settings; exits with status 1 when configuration is missing."""
    configure_logging(settings)
    try:
        settings.validate(require_object_store=require_object_store)
    except ConfigurationMissing as e:
        logger.error(f"❌ {e.message}")
        sys.exit(1)
    return settings


def create_object_store() -> S3ObjectStore:
    return S3ObjectStore(create_s3_client(settings), settings.S3_BUCKET_NAME)


class StoreHandles:
    def __init__(self, db):
        self.db = db
        self.documents = DocumentRepository(db)
        self.submissions = SubmissionRepository(db)


@asynccontextmanager
async def open_stores():
    """Connect to MongoDB for the duration of one command."""
    client = AsyncIOMotorClient(settings.MONGODB_URL, serverSelectionTimeoutMS=5000)
    try:
        await client.server_info()
        logger.info(f"✅ Connected to MongoDB: {settings.DATABASE_NAME}")
        yield StoreHandles(client[settings.DATABASE_NAME])
    finally:
        client.close()
