"""Exceptions shared across the backend."""


class CacheError(Exception):
    """Base class for errors raised by byte cache backends."""

    pass


class CachedDataNotFoundError(CacheError):
    """Raised by a byte cache backend when no value is stored under a key.

    A cache miss is the expected, frequent case. Callers detect it with
    ``isinstance`` or ``except CachedDataNotFoundError``.
    """

    pass


class InvalidValueTypeError(CacheError):
    """Raised when a backend returns a value that is not bytes."""

    pass


class SerializationError(Exception):
    """Raised when serialization or deserialization fails."""

    pass


class QueryReturnedNoResultsError(Exception):
    """Raised by storage when the requested entity does not exist."""

    pass


class InvalidPageTokenError(Exception):
    """Raised by storage when a pagination token cannot be decoded."""

    pass


class SearchQueryParseError(Exception):
    """Raised by the search query parser for input outside the grammar."""

    pass
