"""
Express Delivery Store Configuration
Master constants for collection names, seed fixtures, and connection settings
"""

# ============================================================================
# CONNECTION
# ============================================================================

# Environment variable names (loaded from .env by db.mongo)
MONGO_URI_ENV = "MONGO_URI"
DATABASE_NAME_ENV = "DATABASE_NAME"
SERVER_SELECTION_TIMEOUT_ENV = "MONGO_SERVER_SELECTION_TIMEOUT_MS"

DEFAULT_MONGO_URI = "mongodb://localhost:27017"
DEFAULT_DATABASE_NAME = "delivery"
DEFAULT_SERVER_SELECTION_TIMEOUT_MS = 5000


# ============================================================================
# COLLECTIONS
# ============================================================================

USERS = "users"
DELIVERIES = "deliveries"
TRACKING_EVENTS = "tracking_events"
NOTIFICATIONS = "notifications"

# Provisioning order
COLLECTION_NAMES = [
    USERS,
    DELIVERIES,
    TRACKING_EVENTS,
    NOTIFICATIONS,
]


# ============================================================================
# SEED FIXTURES
# ============================================================================
#
# Stable identifying keys. Reruns locate fixtures by these values, so they
# must never change once a database has been seeded.
#

CUSTOMER_EMAIL = "customer@example.com"
COURIER_EMAIL = "courier@example.com"

SEED_DELIVERY_MARKER = "seed_delivery_1"
SEED_TRACKING_MARKERS = ["seed_tracking_1", "seed_tracking_2"]
SEED_NOTIFICATION_MARKER = "seed_notification_1"

# Field used as the identifying key for fixtures with no natural unique key
SEED_MARKER_FIELD = "seedMarker"
