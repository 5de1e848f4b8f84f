"""
Seed Engine
===========

Creates the fixture graph in dependency order:

    customer, courier -> delivery -> tracking events, notification

Each step is a find-or-create keyed by a stable value (email or seedMarker)
and returns the id later steps reference. Reruns resolve existing documents
and change nothing on them.

A step whose parent ids are not all resolved is refused before it touches the
store. A failing step aborts the run; steps already committed stay committed
and the next run picks up from them.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from bson import ObjectId
from pymongo.database import Database
from pymongo.errors import PyMongoError

from config import (
    USERS,
    DELIVERIES,
    TRACKING_EVENTS,
    NOTIFICATIONS,
    CUSTOMER_EMAIL,
    COURIER_EMAIL,
    SEED_DELIVERY_MARKER,
    SEED_TRACKING_MARKERS,
    SEED_NOTIFICATION_MARKER,
    SEED_MARKER_FIELD,
)
from db.errors import MissingParentReferenceError, ProvisioningError, SeedAbortedError
from db.upsert import find_or_create
from services import seed_fixtures
from utils.timezone import Clock, now_utc

logger = logging.getLogger(__name__)


@dataclass
class SeedStep:
    """
    One fixture to find or create.

    `requires` names earlier steps whose ids the defaults builder needs;
    the builder receives exactly those ids plus the run's clock value.
    """
    name: str
    collection: str
    key: Dict[str, Any]
    build_defaults: Callable[[Dict[str, ObjectId], datetime], Dict[str, Any]]
    requires: List[str] = field(default_factory=list)


@dataclass
class StepOutcome:
    name: str
    collection: str
    id: ObjectId
    created: bool


@dataclass
class SeedReport:
    """Steps committed by a run, in execution order"""
    outcomes: List[StepOutcome] = field(default_factory=list)

    @property
    def ids(self) -> Dict[str, ObjectId]:
        return {outcome.name: outcome.id for outcome in self.outcomes}

    @property
    def committed(self) -> List[str]:
        return [outcome.name for outcome in self.outcomes]

    @property
    def created(self) -> List[str]:
        return [outcome.name for outcome in self.outcomes if outcome.created]


def default_seed_steps() -> List[SeedStep]:
    """The fixture graph, parents before children"""
    return [
        SeedStep(
            name="customer",
            collection=USERS,
            key={"email": CUSTOMER_EMAIL},
            build_defaults=seed_fixtures.customer_defaults,
        ),
        SeedStep(
            name="courier",
            collection=USERS,
            key={"email": COURIER_EMAIL},
            build_defaults=seed_fixtures.courier_defaults,
        ),
        SeedStep(
            name="delivery",
            collection=DELIVERIES,
            key={SEED_MARKER_FIELD: SEED_DELIVERY_MARKER},
            build_defaults=seed_fixtures.delivery_defaults,
            requires=["customer"],
        ),
        SeedStep(
            name="tracking_1",
            collection=TRACKING_EVENTS,
            key={SEED_MARKER_FIELD: SEED_TRACKING_MARKERS[0]},
            build_defaults=seed_fixtures.first_tracking_defaults,
            requires=["delivery"],
        ),
        SeedStep(
            name="tracking_2",
            collection=TRACKING_EVENTS,
            key={SEED_MARKER_FIELD: SEED_TRACKING_MARKERS[1]},
            build_defaults=seed_fixtures.second_tracking_defaults,
            requires=["delivery"],
        ),
        SeedStep(
            name="notification",
            collection=NOTIFICATIONS,
            key={SEED_MARKER_FIELD: SEED_NOTIFICATION_MARKER},
            build_defaults=seed_fixtures.notification_defaults,
            requires=["customer"],
        ),
    ]


class SeedEngine:
    """Runs an ordered list of seed steps against one database"""

    def __init__(self, db: Database, clock: Clock = now_utc, steps: Optional[List[SeedStep]] = None):
        self.db = db
        self.clock = clock
        self.steps = steps if steps is not None else default_seed_steps()

    def _resolve_parents(self, step: SeedStep, ids: Dict[str, ObjectId]) -> Dict[str, ObjectId]:
        missing = [name for name in step.requires if ids.get(name) is None]
        if missing:
            raise MissingParentReferenceError(step.name, missing)
        return {name: ids[name] for name in step.requires}

    def run(self) -> SeedReport:
        """
        Execute every step in order.

        Returns:
            SeedReport of all steps

        Raises:
            SeedAbortedError: a step failed; `.report` lists the committed steps
        """
        # One timestamp for the whole run keeps fixture times consistent
        now = self.clock()
        report = SeedReport()
        ids: Dict[str, ObjectId] = {}

        for step in self.steps:
            try:
                parents = self._resolve_parents(step, ids)
                defaults = step.build_defaults(parents, now)
                result = find_or_create(self.db[step.collection], step.key, defaults)
            except (ProvisioningError, PyMongoError) as e:
                logger.error(f"❌ Seed step '{step.name}' failed: {e}")
                raise SeedAbortedError(step.name, report, e) from e

            ids[step.name] = result.id
            report.outcomes.append(StepOutcome(step.name, step.collection, result.id, result.created))

            state = "created" if result.created else "already present"
            logger.info(f"✓ {step.name} _id: {result.id} ({state})")

        logger.info(f"✓ Seed ensured: {len(report.created)} created, "
                    f"{len(report.outcomes) - len(report.created)} already present")
        return report
