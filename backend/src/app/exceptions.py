"""Custom exception classes for the application.

This module provides domain-specific exception classes that carry
an HTTP status code and structured error information. The product
handler answers every failure with 500, so every subclass keeps the
default status code; the attribute is there for callers that want a
finer mapping.
"""

from __future__ import annotations

from typing import Optional


class AppError(Exception):
    """Base exception for application errors.

    All application-specific exceptions should inherit from this class.
    Each exception carries an HTTP status code and optional details.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code (default 500).
        detail: Optional additional context.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        detail: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail


class UnsupportedRouteError(AppError):
    """Raised when the HTTP method has no matching operation."""

    def __init__(self, method: Optional[str]):
        super().__init__(f'Unsupported route: "{method}"')
        self.method = method


class MalformedBodyError(AppError):
    """Raised when a request body is not a usable JSON document.

    Use for bodies that fail to decode, are not JSON objects, or
    carry nothing to apply.
    """

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message, detail=detail)


class MissingParameterError(AppError):
    """Raised when a required path or query parameter is absent."""

    def __init__(self, parameter: str):
        super().__init__(f"Missing required parameter: {parameter}")
        self.parameter = parameter


class StoreError(AppError):
    """Raised when a DynamoDB call fails.

    Use for transport, credential, throttling and expression errors
    reported by botocore.

    Attributes:
        operation: The DynamoDB API operation that failed.
        code: AWS error code when the service returned one.
    """

    def __init__(
        self,
        operation: str,
        message: str,
        code: Optional[str] = None,
    ):
        super().__init__(message, detail=f"Operation: {operation}")
        self.operation = operation
        self.code = code


class ConfigurationError(AppError):
    """Raised when required configuration is missing.

    Use when environment variables or settings are not properly configured.
    """

    def __init__(self, config_name: str):
        super().__init__(f"Missing required configuration: {config_name}")
        self.config_name = config_name
