"""
Provisioning Errors
All fatal conditions raised while provisioning or seeding the store.
"""
from typing import Any, Dict, List, Optional


class ProvisioningError(Exception):
    """Base class for every fatal provisioning/seeding failure"""
    pass


class StoreUnreachableError(ProvisioningError):
    """Raised when the store cannot be reached at connect time"""

    def __init__(self, target: str, cause: Exception):
        self.target = target
        self.cause = cause
        super().__init__(f"MongoDB unreachable at {target}: {cause}")


class IndexSpecConflictError(ProvisioningError):
    """Raised when an index with the same name exists with a different definition"""

    def __init__(self, collection: str, name: str, expected: Dict[str, Any], actual: Dict[str, Any]):
        self.collection = collection
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Index '{name}' on '{collection}' conflicts with the required definition "
            f"(expected {expected}, found {actual}). Refusing to drop or recreate it."
        )


class MissingParentReferenceError(ProvisioningError):
    """Raised before inserting a child document whose parent id is unresolved"""

    def __init__(self, step: str, missing: List[str]):
        self.step = step
        self.missing = missing
        super().__init__(f"Seed step '{step}' is missing required parent id(s): {', '.join(missing)}")


class SeedResolutionError(ProvisioningError):
    """Raised when find-or-create cannot locate the document for its key"""

    def __init__(self, collection: str, key: Dict[str, Any]):
        self.collection = collection
        self.key = key
        super().__init__(f"No document in '{collection}' matches {key} after upsert")


class SeedAbortedError(ProvisioningError):
    """
    Raised when a seed step fails.

    Carries the report of steps committed before the failure so callers can
    see exactly what the aborted run left behind.
    """

    def __init__(self, step: str, report: Any, cause: Optional[Exception] = None):
        self.step = step
        self.report = report
        self.cause = cause
        super().__init__(f"Seeding aborted at step '{step}': {cause}")
