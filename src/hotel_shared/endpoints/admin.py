"""Admin console endpoints: dashboard, users, rooms, reservations, assisted bookings."""

from ..models.admin import (
    DashboardOverview,
    ManagerBookingResponse,
    PaymentLinkBookingResponse,
    RecentReservation,
    ReservationStatistics,
    RoomStatistics,
    TodaysPulseEvent,
)
from ..models.auth import User
from ..models.reservation import Reservation
from ..models.room import Room
from ..services.query_cache import ADMIN, RESERVATION, ROOM, USER, Tag
from .base import Mutation, Query, Request, arg_tag

get_dashboard_overview = Query(
    name="getDashboardOverview",
    build=lambda _: Request("GET", "/admin/dashboard"),
    response=DashboardOverview,
    provides=[Tag(ADMIN)],
)

# Users

get_all_users = Query(
    name="getAllUsers",
    build=lambda _: Request("GET", "/admin/users"),
    response=list[User],
    provides=[Tag(USER)],
)

get_user_by_id = Query(
    name="getUserById",
    build=lambda user_id: Request("GET", f"/admin/users/{user_id}"),
    response=User,
    provides=arg_tag(USER),
)

create_user = Mutation(
    name="createUser",
    build=lambda body: Request("POST", "/admin/users", body=body),
    response=User,
    invalidates=[Tag(USER)],
)

# arg: {"id": ..., "enabled": bool}
update_user_status = Mutation(
    name="updateUserStatus",
    build=lambda arg: Request(
        "PUT", f"/admin/users/{arg['id']}/status", body={"enabled": arg["enabled"]}
    ),
    response=User,
    invalidates=arg_tag(USER, Tag(USER)),
)

delete_user = Mutation(
    name="deleteUser",
    build=lambda user_id: Request("DELETE", f"/admin/users/{user_id}"),
    invalidates=[Tag(USER)],
)

# Rooms

get_all_rooms_admin = Query(
    name="getAllRoomsAdmin",
    build=lambda _: Request("GET", "/admin/rooms"),
    response=list[Room],
    provides=[Tag(ROOM)],
)

get_room_statistics = Query(
    name="getRoomStatistics",
    build=lambda _: Request("GET", "/admin/rooms/statistics"),
    response=RoomStatistics,
    provides=[Tag(ROOM)],
)

# Reservations

get_all_reservations_admin = Query(
    name="getAllReservationsAdmin",
    build=lambda _: Request("GET", "/admin/reservations"),
    response=list[Reservation],
    provides=[Tag(RESERVATION)],
)

get_reservations_by_date_range = Query(
    name="getReservationsByDateRange",
    build=lambda r: Request(
        "GET",
        "/admin/reservations/date-range",
        params={"startDate": r.start_date.isoformat(), "endDate": r.end_date.isoformat()},
    ),
    response=list[Reservation],
    provides=[Tag(RESERVATION)],
)

# arg: {"id": ..., "status": ReservationStatus}
update_reservation_status = Mutation(
    name="updateReservationStatus",
    build=lambda arg: Request(
        "PUT", f"/admin/reservations/{arg['id']}/status", body={"status": arg["status"]}
    ),
    response=Reservation,
    invalidates=arg_tag(RESERVATION, Tag(RESERVATION), Tag(ROOM)),
)

get_reservation_statistics = Query(
    name="getReservationStatistics",
    build=lambda _: Request("GET", "/admin/reservations/statistics"),
    response=ReservationStatistics,
    provides=[Tag(RESERVATION)],
)

get_todays_pulse = Query(
    name="getTodaysPulse",
    build=lambda _: Request("GET", "/admin/reservations/todays-pulse"),
    response=list[TodaysPulseEvent],
    provides=[Tag(RESERVATION)],
)

get_recent_reservations = Query(
    name="getRecentReservations",
    build=lambda _: Request("GET", "/admin/reservations/recent"),
    response=list[RecentReservation],
    provides=[Tag(RESERVATION)],
)

# Assisted bookings

create_assisted_booking_token = Mutation(
    name="createAssistedBookingToken",
    build=lambda body: Request("POST", "/admin/bookings/assisted-token", body=body),
    response=ManagerBookingResponse,
    invalidates=[Tag(RESERVATION), Tag(ROOM), Tag(ADMIN)],
)

create_reservation_with_payment_link = Mutation(
    name="createReservationWithPaymentLink",
    build=lambda body: Request("POST", "/admin/reservations/create-with-payment-link", body=body),
    response=PaymentLinkBookingResponse,
    invalidates=[Tag(RESERVATION), Tag(ROOM), Tag(ADMIN)],
)
