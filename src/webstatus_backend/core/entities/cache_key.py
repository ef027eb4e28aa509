"""Operation cache key value object."""

import re
from dataclasses import dataclass

KEY_SEPARATOR = "-"

_OPERATION_ID_PATTERN = re.compile(r"^[A-Za-z0-9]+$")


@dataclass(frozen=True)
class OperationCacheKey:
    """Immutable cache key for one API operation.

    Combines the operation identifier with the canonical serialization of
    the request object. The operation identifier acts as a namespace so
    all entries of an operation share a common prefix.
    """

    operation_id: str
    serialized_key: str

    def __str__(self) -> str:
        """Return the full cache key string.

        Returns:
            ``<operation_id>-<serialized_key>``.
        """
        return f"{self.operation_id}{KEY_SEPARATOR}{self.serialized_key}"

    @property
    def prefix(self) -> str:
        """The namespace shared by every key of this operation."""
        return f"{self.operation_id}{KEY_SEPARATOR}"

    @staticmethod
    def is_valid_operation_id(operation_id: str) -> bool:
        """Check that an operation identifier cannot contain the separator."""
        return bool(_OPERATION_ID_PATTERN.match(operation_id))

    @classmethod
    def from_bytes(cls, operation_id: str, serialized_key: bytes) -> "OperationCacheKey":
        """Create a key from a serialized request object.

        Args:
            operation_id: The API operation identifier.
            serialized_key: Canonical JSON bytes of the request object.

        Returns:
            A new OperationCacheKey.
        """
        return cls(
            operation_id=operation_id,
            serialized_key=serialized_key.decode("utf-8"),
        )
