"""
MongoDB Connection
Resolves the connection target and opens a verified client/database pair.
"""
import os
import logging
from typing import Optional, Tuple
from dotenv import load_dotenv
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, PyMongoError, ServerSelectionTimeoutError

from config import (
    MONGO_URI_ENV,
    DATABASE_NAME_ENV,
    SERVER_SELECTION_TIMEOUT_ENV,
    DEFAULT_MONGO_URI,
    DEFAULT_DATABASE_NAME,
    DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
)
from db.errors import StoreUnreachableError

load_dotenv()

logger = logging.getLogger(__name__)

SERVER_SELECTION_TIMEOUT_MS = int(
    os.getenv(SERVER_SELECTION_TIMEOUT_ENV, DEFAULT_SERVER_SELECTION_TIMEOUT_MS)
)


def resolve_target(target: Optional[str] = None) -> str:
    """Explicit target wins, then MONGO_URI from the environment, then localhost."""
    if target:
        return target
    return os.getenv(MONGO_URI_ENV, DEFAULT_MONGO_URI)


def sanitize_uri(uri: str) -> str:
    """Hide the password part of a connection string for log output."""
    if "@" not in uri or "//" not in uri:
        return uri
    scheme, rest = uri.split("//", 1)
    auth_part, host_part = rest.rsplit("@", 1)
    if ":" in auth_part:
        username = auth_part.split(":")[0]
        return f"{scheme}//{username}:****@{host_part}"
    return uri


def connect(target: str, timeout_ms: int = SERVER_SELECTION_TIMEOUT_MS) -> Tuple[MongoClient, Database]:
    """
    Open a client for `target` and verify the server answers a ping.

    The database is the one named in the connection string path, falling back
    to DATABASE_NAME.

    Raises:
        StoreUnreachableError: if the server cannot be selected or the ping fails
    """
    logger.info(f"🔌 Connecting to {sanitize_uri(target)}")
    client = MongoClient(target, serverSelectionTimeoutMS=timeout_ms)
    try:
        client.admin.command("ping")
    except (ServerSelectionTimeoutError, ConnectionFailure) as e:
        client.close()
        raise StoreUnreachableError(sanitize_uri(target), e) from e
    except PyMongoError:
        client.close()
        raise

    db = client.get_default_database(default=os.getenv(DATABASE_NAME_ENV, DEFAULT_DATABASE_NAME))
    logger.info(f"✅ Connected, database: {db.name}")
    return client, db
