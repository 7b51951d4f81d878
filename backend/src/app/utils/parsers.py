"""Shared parsing utilities for request handling."""

from __future__ import annotations

import base64
import binascii
import json
from decimal import Decimal
from typing import Any
from typing import Mapping
from typing import Optional

from app.exceptions import MalformedBodyError
from app.exceptions import MissingParameterError


def parse_json_body(event: Mapping[str, Any]) -> Any:
    """Parse the JSON request body of an API Gateway event.

    Numbers are decoded as ``Decimal`` so they can be stored in DynamoDB,
    which rejects binary floats.

    Args:
        event: The Lambda event.

    Returns:
        The decoded JSON value, or None when the body is absent or empty.

    Raises:
        MalformedBodyError: If the body cannot be decoded.
    """
    raw = event.get("body")
    if raw is None or raw == "":
        return None
    try:
        if event.get("isBase64Encoded"):
            raw = base64.b64decode(raw, validate=True).decode("utf-8")
        return json.loads(raw, parse_float=Decimal)
    except json.JSONDecodeError as exc:
        raise MalformedBodyError(f"Invalid JSON body: {exc}") from exc
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise MalformedBodyError(f"Invalid base64 body: {exc}") from exc


def parse_object_body(event: Mapping[str, Any]) -> dict[str, Any]:
    """Parse the request body as a JSON object.

    A missing body, ``null`` or any other falsy JSON value yields an
    empty dict.

    Raises:
        MalformedBodyError: If the body is not valid JSON or is a
            non-empty value other than an object.
    """
    payload = parse_json_body(event)
    if not payload:
        return {}
    if not isinstance(payload, dict):
        raise MalformedBodyError(
            "Request body must be a JSON object",
            detail=f"Got {type(payload).__name__}",
        )
    return payload


def get_path_param(
    event: Mapping[str, Any],
    name: str,
    required: bool = True,
) -> Optional[str]:
    """Return a path parameter value.

    Raises:
        MissingParameterError: If ``required`` and the parameter is absent.
    """
    value = (event.get("pathParameters") or {}).get(name)
    if required and not value:
        raise MissingParameterError(name)
    return value


def get_query_param(
    event: Mapping[str, Any],
    name: str,
    required: bool = True,
) -> Optional[str]:
    """Return a query string parameter value.

    Raises:
        MissingParameterError: If ``required`` and the parameter is absent.
    """
    value = (event.get("queryStringParameters") or {}).get(name)
    if required and value is None:
        raise MissingParameterError(name)
    return value
