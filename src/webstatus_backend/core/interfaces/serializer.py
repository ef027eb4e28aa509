"""Serializer interface."""

from typing import Any, Protocol, TypeVar

T = TypeVar("T")


class ISerializer(Protocol):
    """Contract for serializing request keys and cached responses.

    Serialization must be canonical: logically equal values always
    produce the same bytes.
    """

    def serialize(self, value: Any) -> bytes:
        """Serialize value to bytes.

        Args:
            value: The Python object to serialize.

        Returns:
            The serialized value as bytes.

        Raises:
            SerializationError: If the value cannot be serialized.
        """
        ...

    def deserialize(self, data: bytes, value_type: type[T]) -> T:
        """Deserialize bytes into an instance of ``value_type``.

        Args:
            data: The bytes to deserialize.
            value_type: The expected type of the result.

        Returns:
            The deserialized value.

        Raises:
            SerializationError: If the data does not decode into value_type.
        """
        ...
