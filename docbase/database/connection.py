import re
import logging
from typing import Optional, Dict, Any, List, Tuple, Type
from urllib.parse import urlparse

from beanie import Document, init_beanie
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from docbase.config import get_settings
from docbase.models.demo import Demo

logger = logging.getLogger(__name__)

# Document models bound to the database on startup
DOCUMENT_MODELS: List[Type[Document]] = [
    Demo,
]


class Database:
    client: Optional[AsyncIOMotorClient] = None

db = Database()


def is_documentdb_uri(uri: str) -> bool:
    """Detect if the MongoDB URI is pointing to AWS DocumentDB"""
    documentdb_patterns = [
        r'\.docdb\.',
        r'amazonaws\.com',
    ]

    return any(re.search(pattern, uri) for pattern in documentdb_patterns)


def mask_uri(uri: str) -> str:
    """Hide credentials in a MongoDB URI for safe logging"""
    if '@' not in uri or '://' not in uri:
        return uri
    protocol, rest = uri.split('://', 1)
    return f"{protocol}://*****@{rest.rsplit('@', 1)[1]}"


def parse_mongo_uri(uri: str) -> Tuple[str, Dict[str, Any]]:
    """Parse a MongoDB URI and return the database name and connection options"""
    db_name = get_settings().mongo_database

    path = urlparse(uri).path.strip('/')
    if path:
        db_name = path

    if is_documentdb_uri(uri):
        client_kwargs = {
            'serverSelectionTimeoutMS': 30000,
            'connectTimeoutMS': 30000,
            'socketTimeoutMS': 30000,
            'retryWrites': False,  # DocumentDB doesn't support retryWrites
            'readPreference': 'primary',
        }
    else:
        client_kwargs = {
            'serverSelectionTimeoutMS': 5000,
            'connectTimeoutMS': 5000,
            'retryWrites': True,
            'readPreference': 'primary',
        }

    return db_name, client_kwargs


async def connect_to_mongo():
    """Connect to MongoDB and bind the document models"""
    mongo_uri = get_settings().mongodb_uri
    db_name, client_kwargs = parse_mongo_uri(mongo_uri)

    try:
        logger.info(f"Connecting to MongoDB with URI: {mask_uri(mongo_uri)}")
        db.client = AsyncIOMotorClient(mongo_uri, **client_kwargs)

        logger.info(f"Using database: {db_name}")
        await init_beanie(
            database=db.client.get_database(db_name),
            document_models=DOCUMENT_MODELS,
        )

        await db.client.admin.command('ping')
        logger.info("Successfully connected to MongoDB")
    except Exception as e:
        logger.error(f"Could not connect to database: {e}")
        raise


async def close_mongo_connection():
    """Close MongoDB connection"""
    if db.client:
        db.client.close()
        db.client = None
        logger.info("Closed MongoDB connection")


def get_database() -> AsyncIOMotorDatabase:
    """Get the database handle the document models are bound to"""
    if db.client is None:
        raise RuntimeError("Database not initialized. Call connect_to_mongo() first.")

    db_name, _ = parse_mongo_uri(get_settings().mongodb_uri)
    return db.client.get_database(db_name)


async def check_db_connection() -> bool:
    """Check if the MongoDB connection is healthy"""
    if db.client is None:
        return False

    try:
        await get_database().command('ping')
        return True
    except Exception as e:
        logger.warning(f"MongoDB ping failed: {e}")
        return False
