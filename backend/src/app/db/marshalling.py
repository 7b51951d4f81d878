"""Conversion between plain mappings and DynamoDB attribute values.

The low-level DynamoDB client exchanges items as self-describing maps
such as ``{"name": {"S": "Lamp"}, "price": {"N": "10"}}``. These helpers
wrap boto3's serializers so the rest of the package only sees plain
dictionaries.
"""

from __future__ import annotations

from decimal import DecimalException
from typing import Any
from typing import Mapping

from boto3.dynamodb.types import TypeDeserializer
from boto3.dynamodb.types import TypeSerializer

from app.exceptions import MalformedBodyError

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def marshall(item: Mapping[str, Any]) -> dict[str, dict[str, Any]]:
    """Convert a plain mapping to a DynamoDB attribute map.

    Args:
        item: Plain mapping. Numbers must be ``int`` or ``Decimal``.

    Returns:
        Mapping of attribute name to typed attribute value.

    Raises:
        MalformedBodyError: If a value has no DynamoDB representation.
    """
    return {key: marshall_value(value, field=key) for key, value in item.items()}


def unmarshall(attributes: Mapping[str, Mapping[str, Any]]) -> dict[str, Any]:
    """Convert a DynamoDB attribute map to a plain dictionary."""
    return {
        key: _deserializer.deserialize(value) for key, value in attributes.items()
    }


def marshall_value(value: Any, field: str | None = None) -> dict[str, Any]:
    """Convert a single value to a typed attribute value.

    Raises:
        MalformedBodyError: For floats (including NaN and infinities) and
            numbers DynamoDB cannot store exactly (over 38 digits or out
            of range).
    """
    try:
        return _serializer.serialize(value)
    except TypeError as exc:
        raise MalformedBodyError(
            f"Unsupported value for DynamoDB: {exc}",
            detail=f"Field: {field}" if field else None,
        ) from exc
    except DecimalException as exc:
        raise MalformedBodyError(
            "Number cannot be stored in DynamoDB: at most 38 significant "
            "digits and a magnitude between 1E-130 and 1E+126 are supported",
            detail=f"Field: {field}" if field else None,
        ) from exc
