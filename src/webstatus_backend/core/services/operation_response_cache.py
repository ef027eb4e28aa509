"""Operation response cache - per-operation caching of API responses."""

import logging
from collections.abc import Sequence
from enum import Enum
from typing import Generic, TypeVar

from webstatus_backend.core.entities.cache_config import CacheOption
from webstatus_backend.core.entities.cache_key import OperationCacheKey
from webstatus_backend.core.exceptions import CachedDataNotFoundError, SerializationError
from webstatus_backend.core.interfaces.cache_backend import RawBytesDataCacher
from webstatus_backend.core.interfaces.serializer import ISerializer
from webstatus_backend.infrastructure.serializers.json import JsonSerializer

logger = logging.getLogger(__name__)

K = TypeVar("K")
R = TypeVar("R")


class LookupOutcome(Enum):
    """How a lookup was resolved."""

    HIT = "hit"
    NOT_FOUND = "not_found"
    SERIALIZE_ERROR = "serialize_error"
    BACKEND_ERROR = "backend_error"
    DESERIALIZE_ERROR = "deserialize_error"


class OperationResponseCache(Generic[K, R]):
    """Caches the responses of one API operation in a RawBytesDataCacher.

    The operation identifier prefixes every key, so the entries of an
    operation are grouped and could later be deleted by prefix. Request
    objects and responses go through the serializer on the way in and
    out.

    Caching is best effort. Neither attempt_cache nor lookup raise: every
    fault is logged and turned into a no-op or a miss, so a broken cache
    behaves as if there were no cache.

    Instances hold no mutable state and can be shared by concurrent
    requests.
    """

    def __init__(
        self,
        cacher: RawBytesDataCacher,
        operation_id: str,
        response_type: type[R],
        override_cache_options: Sequence[CacheOption] | None = None,
        serializer: ISerializer | None = None,
    ) -> None:
        """Initialize the operation response cache.

        Args:
            cacher: The shared byte cache backend.
            operation_id: The API operation identifier, used as key prefix.
            response_type: The type cached responses deserialize into.
            override_cache_options: Options passed to the backend on every
                store. None uses the backend defaults.
            serializer: Serializer for keys and values. Defaults to JSON.
        """
        if not OperationCacheKey.is_valid_operation_id(operation_id):
            raise ValueError(f"invalid operation id: {operation_id!r}")

        self._cacher = cacher
        self._operation_id = operation_id
        self._response_type = response_type
        self._override_cache_options = tuple(override_cache_options or ())
        self._serializer = serializer or JsonSerializer()

    @property
    def operation_id(self) -> str:
        """Get the operation identifier."""
        return self._operation_id

    @property
    def response_type(self) -> type[R]:
        """Get the type cached responses deserialize into."""
        return self._response_type

    @property
    def override_cache_options(self) -> tuple[CacheOption, ...]:
        """Get the options passed to the backend on every store."""
        return self._override_cache_options

    def key(self, request_key: K) -> str:
        """Derive the backend key for a request object.

        Args:
            request_key: The request object.

        Returns:
            ``<operation_id>-<canonical JSON of request_key>``.

        Raises:
            SerializationError: If the request object cannot be serialized.
        """
        serialized = self._serializer.serialize(request_key)
        return str(OperationCacheKey.from_bytes(self._operation_id, serialized))

    async def attempt_cache(self, request_key: K, value: R | None) -> None:
        """Try to cache a response for a request object.

        Failures are logged and otherwise ignored: caching must never keep
        the main operation from completing.

        Args:
            request_key: The request object the response answers.
            value: The response to cache. None is never cached.
        """
        if value is None:
            # Should never reach here
            logger.error(
                "unable to cache nil value operation=%s", self._operation_id
            )
            return

        try:
            key = self.key(request_key)
        except SerializationError as e:
            logger.error(
                "unable to marshal key for cache store operation=%s key=%r error=%s",
                self._operation_id, request_key, e,
            )
            return

        try:
            data = self._serializer.serialize(value)
        except SerializationError as e:
            logger.error(
                "unable to marshal value for cache store operation=%s value=%r error=%s",
                self._operation_id, value, e,
            )
            return

        try:
            await self._cacher.cache(key, data, *self._override_cache_options)
        except Exception as e:
            logger.error(
                "encountered unexpected error when caching operation=%s key=%r error=%s",
                self._operation_id, request_key, e,
            )

    async def lookup(self, request_key: K) -> R | None:
        """Look up the cached response for a request object.

        Args:
            request_key: The request object.

        Returns:
            The cached response, or None on a miss or on any cache fault.
        """
        outcome, value = await self._lookup(request_key)
        if outcome is LookupOutcome.HIT:
            return value
        return None

    async def _lookup(self, request_key: K) -> tuple[LookupOutcome, R | None]:
        try:
            key = self.key(request_key)
        except SerializationError as e:
            logger.error(
                "unable to marshal key for cache lookup operation=%s key=%r error=%s",
                self._operation_id, request_key, e,
            )
            return LookupOutcome.SERIALIZE_ERROR, None

        try:
            data = await self._cacher.get(key)
        except CachedDataNotFoundError:
            return LookupOutcome.NOT_FOUND, None
        except Exception as e:
            logger.error(
                "encountered unexpected error from cache operation=%s key=%r error=%s",
                self._operation_id, request_key, e,
            )
            return LookupOutcome.BACKEND_ERROR, None

        try:
            value = self._serializer.deserialize(data, self._response_type)
        except SerializationError as e:
            logger.error(
                "unable to unmarshal cached data operation=%s key=%r error=%s value=%r",
                self._operation_id, request_key, e, data,
            )
            return LookupOutcome.DESERIALIZE_ERROR, None

        return LookupOutcome.HIT, value
