"""
User roles and status enumerations.

Defines the closed role set of the valet operation and the statuses of the
rows the dashboards count.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        ADMIN: Operates the platform; implicit access to every active location
        OWNER: Owns one or more locations (via location access grants)
        MANAGER: Runs a single location (by convention one access grant)
        DRIVER: Parks cars; authenticates through the mobile app only
    """
    ADMIN = "ADMIN"
    OWNER = "OWNER"
    MANAGER = "MANAGER"
    DRIVER = "DRIVER"


# role_master seed values; role_id is the numeric role reference carried in tokens
ROLE_IDS = {
    UserRole.ADMIN: 1,
    UserRole.OWNER: 2,
    UserRole.MANAGER: 3,
    UserRole.DRIVER: 4,
}

class ValetTransactionStatus(str, enum.Enum):
    """Valet ticket lifecycle (written by the driver app)."""
    PARKED = "PARKED"
    RETURN_REQUESTED = "RETURN_REQUESTED"
    READY = "READY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# Vehicle is still in the operation's custody
ACTIVE_PARKING_STATUSES = (
    ValetTransactionStatus.PARKED,
    ValetTransactionStatus.RETURN_REQUESTED,
    ValetTransactionStatus.READY,
)


class BlockEntryStatus(str, enum.Enum):
    """Parking block slot status."""
    AVAILABLE = "AVAILABLE"
    OCCUPIED = "OCCUPIED"
    BLOCKED = "BLOCKED"
