"""Guest preference endpoints."""

from ..models.preferences import UserPreferences
from ..services.query_cache import PREFERENCES, Tag
from .base import Mutation, Query, Request, arg_tag

get_my_preferences = Query(
    name="getMyPreferences",
    build=lambda _: Request("GET", "/preferences"),
    response=UserPreferences,
    provides=[Tag(PREFERENCES)],
)

get_user_preferences = Query(
    name="getUserPreferences",
    build=lambda user_id: Request("GET", f"/preferences/{user_id}"),
    response=UserPreferences,
    provides=arg_tag(PREFERENCES),
)

update_my_preferences = Mutation(
    name="updateMyPreferences",
    build=lambda preferences: Request("PUT", "/preferences", body=preferences),
    response=UserPreferences,
    invalidates=[Tag(PREFERENCES)],
)

# arg: {"user_id": ..., "preferences": UpdatePreferencesRequest}
update_user_preferences = Mutation(
    name="updateUserPreferences",
    build=lambda arg: Request("PUT", f"/preferences/{arg['user_id']}", body=arg["preferences"]),
    response=UserPreferences,
    invalidates=arg_tag(PREFERENCES),
)

reset_my_preferences = Mutation(
    name="resetMyPreferences",
    build=lambda _: Request("POST", "/preferences/reset"),
    response=UserPreferences,
    invalidates=[Tag(PREFERENCES)],
)

delete_my_preferences = Mutation(
    name="deleteMyPreferences",
    build=lambda _: Request("DELETE", "/preferences"),
    invalidates=[Tag(PREFERENCES)],
)
