"""Backend endpoint definitions, grouped by resource.

Usage:
    from hotel_shared.endpoints import ApiSession, rooms

    api = ApiSession(client, session.auth, session.cache)
    room = await api.query(rooms.get_room_by_id, room_id)
"""

from . import admin, auth, payments, preferences, reservations, rooms
from .base import ApiSession, Endpoint, Mutation, Query, Request

__all__ = [
    "ApiSession",
    "Endpoint",
    "Mutation",
    "Query",
    "Request",
    "admin",
    "auth",
    "payments",
    "preferences",
    "reservations",
    "rooms",
]
