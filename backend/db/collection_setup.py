"""
Collection Setup
Creates the delivery collections when they are missing.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import CollectionInvalid, OperationFailure

from config import COLLECTION_NAMES

logger = logging.getLogger(__name__)

# Server error code for creating a collection that already exists
NAMESPACE_EXISTS = 48


@dataclass
class EnsuredCollection:
    """Handle to a collection plus whether this call created it"""
    collection: Collection
    created: bool


def ensure_collection(db: Database, name: str) -> EnsuredCollection:
    """Create collection `name` if absent; return its handle either way."""
    if name in db.list_collection_names():
        logger.info(f"- Collection exists: {name}")
        return EnsuredCollection(db[name], created=False)

    try:
        db.create_collection(name)
    except (CollectionInvalid, OperationFailure) as e:
        # Created by a concurrent run between the check and the create
        if isinstance(e, OperationFailure) and e.code != NAMESPACE_EXISTS:
            raise
        logger.info(f"- Collection exists: {name}")
        return EnsuredCollection(db[name], created=False)

    logger.info(f"✓ Created collection: {name}")
    return EnsuredCollection(db[name], created=True)


def ensure_collections(db: Database, names: Iterable[str] = COLLECTION_NAMES) -> Dict[str, EnsuredCollection]:
    return {name: ensure_collection(db, name) for name in names}
