"""
Database Index Definitions
===========================

Required indexes for the delivery collections. Index names are an external
contract: operational tooling and later migrations look indexes up by name.

An index that already exists with the same name and definition is left alone.
An index that exists under the same name with a different definition is a
configuration error and is never dropped or recreated implicitly.

List current indexes with:
    python backend/db/indexes.py --list
"""

import os
import sys
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple
from pymongo import ASCENDING, DESCENDING, IndexModel
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import OperationFailure
import logging
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import USERS, DELIVERIES, TRACKING_EVENTS, NOTIFICATIONS
from db.errors import IndexSpecConflictError

logger = logging.getLogger(__name__)

# Server error codes for an index whose name or key clashes with an existing one
INDEX_OPTIONS_CONFLICT = 85
INDEX_KEY_SPECS_CONFLICT = 86


# ============================================================================
# INDEX DEFINITIONS
# ============================================================================

def get_users_indexes() -> List[IndexModel]:
    """Users collection indexes"""
    return [
        # One account per email
        IndexModel(
            [("email", ASCENDING)],
            unique=True,
            name="users_email_unique"
        )
    ]


def get_deliveries_indexes() -> List[IndexModel]:
    """Deliveries collection indexes"""
    return [
        # Customer's deliveries
        IndexModel(
            [("customerId", ASCENDING)],
            name="deliveries_customerId"
        ),

        # Courier's assigned deliveries
        IndexModel(
            [("courierId", ASCENDING)],
            name="deliveries_courierId"
        ),

        # Dispatch queues by status
        IndexModel(
            [("status", ASCENDING)],
            name="deliveries_status"
        ),

        # Most recent first
        IndexModel(
            [("createdAt", DESCENDING)],
            name="deliveries_createdAt_desc"
        )
    ]


def get_tracking_events_indexes() -> List[IndexModel]:
    """Tracking events collection indexes"""
    return [
        # Latest position for a delivery
        IndexModel(
            [("deliveryId", ASCENDING), ("createdAt", DESCENDING)],
            name="tracking_deliveryId_createdAt_desc"
        )
    ]


def get_notifications_indexes() -> List[IndexModel]:
    """Notifications collection indexes"""
    return [
        # Unread notifications for a user
        IndexModel(
            [("userId", ASCENDING), ("read", ASCENDING)],
            name="notifications_userId_read"
        )
    ]


# ============================================================================
# INDEX APPLICATION
# ============================================================================

INDEX_DEFINITIONS = {
    USERS: get_users_indexes(),
    DELIVERIES: get_deliveries_indexes(),
    TRACKING_EVENTS: get_tracking_events_indexes(),
    NOTIFICATIONS: get_notifications_indexes()
}


@dataclass
class IndexOutcome:
    """Result of ensuring one named index"""
    collection: str
    name: str
    created: bool


# Fields the server adds or ignores; everything else is part of the definition
INDEX_HOUSEKEEPING_FIELDS = {"name", "key", "v", "ns", "background"}


def _normalize_key(key: Iterable[Tuple[str, Any]]) -> List[Tuple[str, Any]]:
    normalized = []
    for field, direction in key:
        # Servers may report numeric directions as floats
        if isinstance(direction, (int, float)) and not isinstance(direction, bool):
            direction = int(direction)
        normalized.append((field, direction))
    return normalized


def _describe(fields: Dict[str, Any], key: Iterable[Tuple[str, Any]]) -> Dict[str, Any]:
    shape = {option: value for option, value in fields.items() if option not in INDEX_HOUSEKEEPING_FIELDS}
    shape["key"] = _normalize_key(key)
    shape["unique"] = bool(shape.get("unique", False))
    if not shape.get("sparse", False):
        shape.pop("sparse", None)
    return shape


def describe_index_model(model: IndexModel) -> Dict[str, Any]:
    """Comparable shape of a required index: key fields/directions plus every option."""
    document = model.document
    return _describe(document, document["key"].items())


def describe_existing_index(info: Dict[str, Any]) -> Dict[str, Any]:
    """Comparable shape of an entry from Collection.index_information()."""
    return _describe(info, info.get("key", []))


def ensure_indexes(collection: Collection, specs: List[IndexModel]) -> List[IndexOutcome]:
    """
    Apply a fixed list of named index definitions to `collection`.

    Returns one outcome per index definition, in order.

    Raises:
        IndexSpecConflictError: an index with the same name but a different
            key, direction, uniqueness or option (sparse, partial filter,
            collation) already exists
    """
    existing = collection.index_information()
    outcomes = []

    for model in specs:
        name = model.document["name"]
        expected = describe_index_model(model)

        if name in existing:
            actual = describe_existing_index(existing[name])
            if actual != expected:
                logger.error(f"  ❌ Index conflict on {collection.name}.{name}: expected {expected}, found {actual}")
                raise IndexSpecConflictError(collection.name, name, expected, actual)
            logger.info(f"  - Index exists: {collection.name}.{name}")
            outcomes.append(IndexOutcome(collection.name, name, created=False))
            continue

        try:
            collection.create_indexes([model])
        except OperationFailure as e:
            if e.code in (INDEX_OPTIONS_CONFLICT, INDEX_KEY_SPECS_CONFLICT):
                actual = {"error": e.details.get("errmsg") if e.details else str(e)}
                logger.error(f"  ❌ Server rejected index {collection.name}.{name}: {e}")
                raise IndexSpecConflictError(collection.name, name, expected, actual) from e
            raise

        logger.info(f"  ✓ Created index: {collection.name}.{name}")
        outcomes.append(IndexOutcome(collection.name, name, created=True))

    return outcomes


def apply_all_indexes(db: Database) -> Dict[str, List[IndexOutcome]]:
    """Apply every definition in INDEX_DEFINITIONS. Stops at the first conflict."""
    results = {}
    for collection_name, indexes in INDEX_DEFINITIONS.items():
        logger.info(f"📦 Collection: {collection_name}")
        results[collection_name] = ensure_indexes(db[collection_name], indexes)

    logger.info("✓ Indexes ensured.")
    return results


def list_all_indexes(db: Database) -> Dict[str, List[Dict[str, Any]]]:
    """Report the indexes currently present on each provisioned collection"""
    report = {}
    for collection_name in INDEX_DEFINITIONS.keys():
        logger.info(f"📦 Collection: {collection_name}")

        indexes = []
        for name, info in db[collection_name].index_information().items():
            entry = {"name": name, **describe_existing_index(info)}
            indexes.append(entry)
            unique = " (UNIQUE)" if entry["unique"] else ""
            logger.info(f"  - {name}: {entry['key']}{unique}")
        report[collection_name] = indexes

    return report


# ============================================================================
# CLI
# ============================================================================

if __name__ == "__main__":
    import argparse

    from db.mongo import connect, resolve_target

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    parser = argparse.ArgumentParser(description="Inspect delivery store indexes")
    parser.add_argument("--list", action="store_true", help="List existing indexes")
    parser.add_argument("target", nargs="?", help="MongoDB connection string")

    args = parser.parse_args()

    if args.list:
        client, database = connect(resolve_target(args.target))
        try:
            list_all_indexes(database)
        finally:
            client.close()
    else:
        parser.print_help()
