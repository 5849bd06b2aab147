"""Declarative backend endpoints and the session that executes them.

An endpoint is a name, a request builder, a response type and the cache tags
it provides (queries) or invalidates (mutations). ApiSession runs endpoints
for one browser session: queries go through the session's QueryCache, and
mutations invalidate their tags once they succeed.
"""

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Optional, Sequence, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from ..models.auth import AuthState
from ..models.errors import ApiError
from ..services.api_client import ApiClient
from ..services.query_cache import LIST, QueryCache, Tag

logger = logging.getLogger(__name__)

DEFAULT_KEEP_UNUSED_FOR = 60.0

TagSpec = Union[Sequence[Tag], Callable[[Any, Any], Sequence[Tag]]]


@dataclass(frozen=True)
class Request:
    """HTTP request produced by an endpoint's builder."""

    method: str
    url: str
    params: Optional[dict[str, Any]] = None
    body: Any = None


@lru_cache(maxsize=None)
def _adapter(response_type: Any) -> TypeAdapter:
    return TypeAdapter(response_type)


def _resolve_tags(tags: TagSpec, result: Any, arg: Any) -> list[Tag]:
    if callable(tags):
        return list(tags(result, arg))
    return list(tags)


def _serialize(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    return value


@dataclass(frozen=True)
class Endpoint:
    """Common endpoint definition.

    Attributes:
        name: Unique name, used in cache keys and logs.
        build: Maps the call argument to a Request.
        response: Type the JSON body is validated into; None returns it raw.
        public: Never send the bearer token.
    """

    name: str
    build: Callable[[Any], Request]
    response: Any = None
    public: bool = False

    def parse(self, data: Any) -> Any:
        """Validate a response body into the endpoint's response type.

        Raises:
            ApiError: If the body does not match the response type.
        """
        if self.response is None or data is None:
            return data
        try:
            return _adapter(self.response).validate_python(data)
        except ValidationError as e:
            logger.error("Invalid %s response: %s", self.name, e)
            raise ApiError(f"Unexpected response from {self.name}", status_code=502) from e


@dataclass(frozen=True)
class Query(Endpoint):
    """Read endpoint whose results are cached.

    Attributes:
        provides: Tags attached to the cached result.
        keep_unused_for: Seconds a result stays cached; 0 always refetches.
    """

    provides: TagSpec = ()
    keep_unused_for: float = DEFAULT_KEEP_UNUSED_FOR

    def cache_key(self, arg: Any) -> str:
        return f"{self.name}({json.dumps(_serialize(arg), sort_keys=True, default=str)})"


@dataclass(frozen=True)
class Mutation(Endpoint):
    """Write endpoint.

    Attributes:
        invalidates: Tags dropped from the cache after a successful call.
    """

    invalidates: TagSpec = ()


def list_tags(tag_type: str) -> Callable[[Any, Any], list[Tag]]:
    """Provide one tag per item id plus the type's LIST tag."""

    def provides(result: Any, arg: Any) -> list[Tag]:
        tags = [Tag(tag_type, item.id) for item in (result or [])]
        tags.append(Tag(tag_type, LIST))
        return tags

    return provides


def arg_tag(tag_type: str, *extra: Tag) -> Callable[[Any, Any], list[Tag]]:
    """Tag the call argument (or its `id`) specifically, plus fixed extra tags."""

    def tags(result: Any, arg: Any) -> list[Tag]:
        item_id = getattr(arg, "id", arg)
        if isinstance(arg, dict):
            item_id = arg.get("id", arg.get("user_id"))
        return [Tag(tag_type, str(item_id)), *extra]

    return tags


class ApiSession:
    """Executes endpoints on behalf of one browser session.

    Usage:
        api = ApiSession(get_api_client(), session.auth, session.cache)
        rooms = await api.query(rooms_endpoints.get_rooms)
        await api.mutate(rooms_endpoints.delete_room, room_id)
    """

    def __init__(self, client: ApiClient, auth: Optional[AuthState], cache: QueryCache) -> None:
        self.client = client
        self.auth = auth or AuthState()
        self.cache = cache

    def _token(self, endpoint: Endpoint, override: Optional[str]) -> Optional[str]:
        if endpoint.public:
            return None
        if override:
            return override
        if self.auth.is_authenticated:
            return self.auth.token
        return None

    async def _send(self, endpoint: Endpoint, arg: Any, token: Optional[str]) -> Any:
        request = endpoint.build(arg)
        data = await self.client.request(
            request.method,
            request.url,
            token=self._token(endpoint, token),
            params=request.params,
            json=_serialize(request.body),
        )
        return endpoint.parse(data)

    async def query(
        self,
        endpoint: Query,
        arg: Any = None,
        *,
        token: Optional[str] = None,
        force: bool = False,
    ) -> Any:
        """Return a cached result or fetch it, sharing identical in-flight fetches.

        Args:
            endpoint: Query definition.
            arg: Argument passed to the request builder.
            token: Use this bearer token instead of the session's.
            force: Skip a cached result.

        Raises:
            ApiError: If the backend call fails; nothing is cached.
        """
        key = endpoint.cache_key(arg)
        if not force:
            entry = self.cache.get(key)
            if entry is not None:
                logger.debug("Cache hit for %s", key)
                return entry.value

        async def fetch() -> Any:
            result = await self._send(endpoint, arg, token)
            tags = _resolve_tags(endpoint.provides, result, arg)
            self.cache.put(key, result, tags, endpoint.keep_unused_for)
            return result

        return await self.cache.run(key, fetch)

    async def mutate(self, endpoint: Mutation, arg: Any = None) -> Any:
        """Run a mutation, then invalidate its tags.

        Raises:
            ApiError: If the backend call fails; the cache is left untouched.
        """
        result = await self._send(endpoint, arg, None)
        tags = _resolve_tags(endpoint.invalidates, result, arg)
        dropped = self.cache.invalidate(tags)
        logger.debug("%s invalidated %d cached queries", endpoint.name, dropped)
        return result

    def invalidate(self, tags: Sequence[Tag]) -> int:
        return self.cache.invalidate(tags)
