"""JSON serializer implementation."""

import functools
from typing import Any, TypeVar

from pydantic import PydanticSchemaGenerationError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from webstatus_backend.core.exceptions import SerializationError
from webstatus_backend.utils.mappings import sort_mapping_keys

T = TypeVar("T")


@functools.lru_cache(maxsize=256)
def _type_adapter(value_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(value_type)


class JsonSerializer:
    """Canonical JSON serializer for request keys and cached responses.

    Handles pydantic models, dataclasses and plain JSON values through
    pydantic type adapters. Output is compact, keeps declared field
    order, sorts mapping keys, uses serialization aliases and omits
    fields that are None.
    """

    def __init__(self, exclude_none: bool = True) -> None:
        """Initialize the JSON serializer.

        Args:
            exclude_none: Whether to omit fields whose value is None.
        """
        self._exclude_none = exclude_none

    def serialize(self, value: Any) -> bytes:
        """Serialize value to bytes.

        Args:
            value: The Python object to serialize.

        Returns:
            The serialized value as bytes.

        Raises:
            SerializationError: If the value cannot be serialized.
        """
        try:
            value = sort_mapping_keys(value)
            adapter = _type_adapter(type(value))
            return adapter.dump_json(
                value,
                by_alias=True,
                exclude_none=self._exclude_none,
            )
        except (
            PydanticSchemaGenerationError,
            PydanticSerializationError,
            TypeError,
            ValueError,
        ) as e:
            raise SerializationError(f"Failed to serialize value: {e}") from e

    def deserialize(self, data: bytes, value_type: type[T]) -> T:
        """Deserialize bytes into an instance of value_type.

        Args:
            data: The bytes to deserialize.
            value_type: The expected type of the result.

        Returns:
            The deserialized value.

        Raises:
            SerializationError: If the data cannot be deserialized.
        """
        try:
            adapter = _type_adapter(value_type)
            return adapter.validate_json(data)
        except (PydanticSchemaGenerationError, ValidationError, ValueError) as e:
            raise SerializationError(f"Failed to deserialize data: {e}") from e
