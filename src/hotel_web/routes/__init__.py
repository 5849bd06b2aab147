"""Web page routes.

Routers are organized by area:

- home: Landing page, about page, unauthorized page
- auth: Login, registration, logout and OAuth2 sign-in
- rooms: Room search and room details with the booking form
- booking: Booking checkout, payment resume, payment links, 3-D Secure return
- reservations: Reservation list, details, manage and cancellation
- profile: Profile and preferences
- payments: Payment history
- admin: Staff console

All routers are registered in main.py without a prefix.
"""

from hotel_web.routes.admin import router as admin_router
from hotel_web.routes.auth import router as auth_router
from hotel_web.routes.booking import router as booking_router
from hotel_web.routes.home import router as home_router
from hotel_web.routes.payments import router as payments_router
from hotel_web.routes.profile import router as profile_router
from hotel_web.routes.reservations import router as reservations_router
from hotel_web.routes.rooms import router as rooms_router

__all__ = [
    "admin_router",
    "auth_router",
    "booking_router",
    "home_router",
    "payments_router",
    "profile_router",
    "reservations_router",
    "rooms_router",
]
