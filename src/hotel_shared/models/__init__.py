"""Pydantic models for data exchanged with the hotel REST backend."""

from .admin import (
    ChargeSummary,
    DashboardOverview,
    ManagerBookingResponse,
    PaymentLinkBookingRequest,
    PaymentLinkBookingResponse,
    RecentReservation,
    ReservationStatistics,
    RoomStatistics,
    TodaysPulseEvent,
    TokenBookingRequest,
)
from .auth import (
    AuthResponse,
    AuthState,
    CreateUserRequest,
    LoginRequest,
    RegisterRequest,
    UpdateProfileRequest,
    User,
)
from .base import ApiModel
from .enums import (
    AvailabilityStatus,
    BedType,
    FloorLevel,
    PaymentStatus,
    ReservationStatus,
    Role,
    RoomType,
    RoomView,
    Severity,
    ThemeMode,
)
from .errors import (
    STRIPE_ERROR_MESSAGES,
    ApiError,
    PaymentProcessorError,
    get_user_friendly_stripe_message,
    resolve_error_message,
)
from .payment import (
    ConfirmPaymentRequest,
    CreatePaymentIntentRequest,
    PaymentIntentResponse,
    RefundRequest,
    Transaction,
)
from .preferences import UpdatePreferencesRequest, UserPreferences
from .reservation import (
    CancellationRequest,
    CancellationResponse,
    CreateReservationRequest,
    DateRange,
    RefundCalculation,
    Reservation,
    UpdateReservationRequest,
)
from .room import (
    AvailabilityQuery,
    AvailableRoomsQuery,
    CreateRoomRequest,
    Room,
    RoomAvailability,
    RoomQueryParams,
    UpdateRoomRequest,
)

__all__ = [
    # Base
    "ApiModel",
    # Enums
    "AvailabilityStatus",
    "BedType",
    "FloorLevel",
    "PaymentStatus",
    "ReservationStatus",
    "Role",
    "RoomType",
    "RoomView",
    "Severity",
    "ThemeMode",
    # Auth
    "AuthResponse",
    "AuthState",
    "CreateUserRequest",
    "LoginRequest",
    "RegisterRequest",
    "UpdateProfileRequest",
    "User",
    # Rooms
    "AvailabilityQuery",
    "AvailableRoomsQuery",
    "CreateRoomRequest",
    "Room",
    "RoomAvailability",
    "RoomQueryParams",
    "UpdateRoomRequest",
    # Reservations
    "CancellationRequest",
    "CancellationResponse",
    "CreateReservationRequest",
    "DateRange",
    "RefundCalculation",
    "Reservation",
    "UpdateReservationRequest",
    # Payments
    "ConfirmPaymentRequest",
    "CreatePaymentIntentRequest",
    "PaymentIntentResponse",
    "RefundRequest",
    "Transaction",
    # Preferences
    "UpdatePreferencesRequest",
    "UserPreferences",
    # Admin
    "ChargeSummary",
    "DashboardOverview",
    "ManagerBookingResponse",
    "PaymentLinkBookingRequest",
    "PaymentLinkBookingResponse",
    "RecentReservation",
    "ReservationStatistics",
    "RoomStatistics",
    "TodaysPulseEvent",
    "TokenBookingRequest",
    # Errors
    "ApiError",
    "PaymentProcessorError",
    "STRIPE_ERROR_MESSAGES",
    "get_user_friendly_stripe_message",
    "resolve_error_message",
]
