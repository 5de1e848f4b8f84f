"""
Delivery store schema init + lightweight seed.

Usage:
    python backend/scripts/init_collections_and_seed.py [MONGO_URI]

Idempotent: safe to run any number of times.
- Creates the four collections if missing
- Ensures the named indexes
- Seeds 1 customer, 1 courier, 1 delivery, 2 tracking events, 1 notification

The connection string comes from the single argument, else MONGO_URI (.env).
Exit status is 0 on success and 1 on any fatal error.
"""
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from pymongo.database import Database
from pymongo.errors import PyMongoError

from config import COLLECTION_NAMES
from db.collection_setup import EnsuredCollection, ensure_collections
from db.errors import ProvisioningError
from db.indexes import IndexOutcome, apply_all_indexes
from db.mongo import connect, resolve_target
from services.seed_engine import SeedEngine, SeedReport
from utils.timezone import Clock, now_utc

logger = logging.getLogger(__name__)


@dataclass
class ProvisionReport:
    collections: Dict[str, EnsuredCollection]
    indexes: Dict[str, List[IndexOutcome]]
    seed: SeedReport


def provision(db: Database, clock: Clock = now_utc) -> ProvisionReport:
    """Collections, then indexes, then the seed graph. Any fatal error propagates."""
    collections = ensure_collections(db, COLLECTION_NAMES)
    indexes = apply_all_indexes(db)
    seed = SeedEngine(db, clock=clock).run()
    return ProvisionReport(collections=collections, indexes=indexes, seed=seed)


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) > 1:
        logger.error("Usage: init_collections_and_seed.py [MONGO_URI]")
        return 2

    target = resolve_target(args[0] if args else None)

    try:
        client, db = connect(target)
    except (ProvisioningError, PyMongoError) as e:
        logger.error(f"❌ {e}")
        return 1

    try:
        provision(db)
    except (ProvisioningError, PyMongoError) as e:
        logger.error(f"❌ Provisioning failed: {e}")
        return 1
    finally:
        client.close()

    logger.info("✅ Schema initialization + seed complete.")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    sys.exit(main())
