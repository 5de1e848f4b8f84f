"""
Find-or-Create
Insert-only upsert keyed by a stable identifying field.

A document is located by `key`. If it exists, nothing on it changes. If it is
absent, one document is inserted holding `key` plus `defaults`. The defaults
are applied with $setOnInsert in a single find_one_and_update, so two racing
callers cannot both insert. The identifier is always re-read by key after the
upsert rather than taken from the driver's return value.
"""
import logging
from dataclasses import dataclass
from typing import Any, Mapping
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from db.errors import SeedResolutionError

logger = logging.getLogger(__name__)


@dataclass
class FindOrCreateResult:
    """Identifier of the document for a key, and whether this call inserted it"""
    id: ObjectId
    created: bool


def _validate_key(key: Mapping[str, Any]) -> None:
    if not key:
        raise ValueError("find_or_create requires a non-empty identifying key")
    for field, value in key.items():
        if field.startswith("$") or isinstance(value, dict):
            raise ValueError(f"Identifying key must be plain equality fields, got {field}={value!r}")
        if value is None:
            raise ValueError(f"Identifying key field '{field}' must not be null")


def find_or_create(collection: Collection, key: Mapping[str, Any], defaults: Mapping[str, Any]) -> FindOrCreateResult:
    """
    Return the id of the document matching `key`, inserting it from `defaults` if absent.

    Args:
        collection: target collection
        key: field/value pair(s) identifying one logical fixture,
             e.g. {"email": "customer@example.com"}
        defaults: fields written only when the document is inserted

    Returns:
        FindOrCreateResult with the authoritative _id

    Raises:
        SeedResolutionError: no document matches `key` after the upsert
    """
    _validate_key(key)
    filter_doc = dict(key)
    # Key fields win over defaults so a fixture can never be inserted under a different key
    on_insert = {field: value for field, value in defaults.items() if field != "_id"}
    on_insert.update(filter_doc)

    created = False
    try:
        before = collection.find_one_and_update(
            filter_doc,
            {"$setOnInsert": on_insert},
            projection={"_id": 1},
            upsert=True,
            return_document=ReturnDocument.BEFORE,
        )
        created = before is None
    except DuplicateKeyError:
        # A concurrent caller inserted the same key first
        logger.warning(f"⚠️  {collection.name}: concurrent insert for {filter_doc}, using existing document")

    existing = collection.find_one(filter_doc, projection={"_id": 1})
    if existing is None:
        raise SeedResolutionError(collection.name, filter_doc)

    return FindOrCreateResult(id=existing["_id"], created=created)
