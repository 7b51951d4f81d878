"""Shared response utilities for Lambda handlers."""

from __future__ import annotations

import base64
import json
import os
from decimal import Decimal
from typing import Any
from typing import Mapping
from typing import Optional

from boto3.dynamodb.types import Binary
from pydantic import BaseModel


def get_security_headers() -> dict[str, str]:
    """Get security headers for all responses.

    Returns:
        Dictionary of security headers.
    """
    return {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Cache-Control": "no-store, no-cache, must-revalidate",
        "Pragma": "no-cache",
    }


def get_cors_headers(
    event: Optional[Mapping[str, Any]] = None,
) -> dict[str, str]:
    """Get CORS headers for the response.

    Allowed origins come from the comma separated ``CORS_ALLOWED_ORIGINS``
    environment variable. When it is unset any origin is allowed.

    Args:
        event: The Lambda event containing the request origin header.

    Returns:
        Dictionary of CORS headers to include in the response.
    """
    allowed_origins = [
        origin.strip()
        for origin in os.getenv("CORS_ALLOWED_ORIGINS", "").split(",")
        if origin.strip()
    ]

    request_origin = None
    if event:
        headers = event.get("headers") or {}
        request_origin = headers.get("origin") or headers.get("Origin")

    if not allowed_origins:
        allow_origin = "*"
    elif request_origin and request_origin in allowed_origins:
        allow_origin = request_origin
    else:
        allow_origin = allowed_origins[0]

    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Headers": (
            "Content-Type,Authorization,X-Amz-Date,X-Api-Key,X-Amz-Security-Token"
        ),
        "Access-Control-Allow-Methods": "GET,POST,PUT,DELETE,OPTIONS",
    }


def json_response(
    status_code: int,
    body: Any,
    event: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    """Create a JSON API Gateway response.

    Args:
        status_code: HTTP status code.
        body: Response body (plain JSON value or Pydantic model).
        event: Optional Lambda event for CORS origin detection.

    Returns:
        API Gateway response dictionary.

    Raises:
        TypeError: If the body holds a value with no JSON encoding.
    """
    response_headers = {
        "Content-Type": "application/json",
    }
    response_headers.update(get_security_headers())
    response_headers.update(get_cors_headers(event))

    if isinstance(body, BaseModel):
        body = body.model_dump(by_alias=True)

    return {
        "statusCode": status_code,
        "headers": response_headers,
        "body": json.dumps(body, default=_json_default),
    }


def _json_default(value: Any) -> Any:
    """Encode DynamoDB value types that ``json`` does not know about.

    Binary attributes come back as ``Binary`` wrappers and are sent as
    base64 text.
    """
    if isinstance(value, Decimal):
        # Integral numbers keep their integer form
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=_set_member_key)
    if isinstance(value, Binary):
        value = value.value
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _set_member_key(member: Any) -> Any:
    # DynamoDB sets are homogeneous: strings, numbers or binaries
    return member.value if isinstance(member, Binary) else member
