"""Enumeration types mirrored from the hotel backend."""

from enum import Enum


class Role(str, Enum):
    """User role granted by the backend."""

    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    GUEST = "GUEST"


class RoomType(str, Enum):
    """Room category."""

    STANDARD = "STANDARD"
    DELUXE = "DELUXE"
    SUITE = "SUITE"
    PRESIDENTIAL = "PRESIDENTIAL"


class ReservationStatus(str, Enum):
    """Lifecycle status of a reservation."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, Enum):
    """Status of a payment transaction."""

    PENDING = "PENDING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class AvailabilityStatus(str, Enum):
    """Availability of a room type for a date range."""

    AVAILABLE = "AVAILABLE"
    LIMITED = "LIMITED"
    FULLY_BOOKED = "FULLY_BOOKED"


class BedType(str, Enum):
    KING = "KING"
    QUEEN = "QUEEN"
    DOUBLE = "DOUBLE"
    TWIN = "TWIN"
    SINGLE = "SINGLE"


class FloorLevel(str, Enum):
    HIGH = "HIGH"
    MIDDLE = "MIDDLE"
    LOW = "LOW"
    GROUND = "GROUND"


class RoomView(str, Enum):
    OCEAN = "OCEAN"
    CITY = "CITY"
    GARDEN = "GARDEN"
    MOUNTAIN = "MOUNTAIN"
    POOL = "POOL"
    COURTYARD = "COURTYARD"


class ThemeMode(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class Severity(str, Enum):
    """Alert severity used by notifications and inline alerts."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
