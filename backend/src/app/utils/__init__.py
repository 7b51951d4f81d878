"""Utility modules for the backend application."""

from app.utils.parsers import (
    get_path_param,
    get_query_param,
    parse_json_body,
    parse_object_body,
)
from app.utils.responses import json_response
from app.utils.logging import (
    configure_logging,
    get_logger,
    set_request_context,
    clear_request_context,
)

__all__ = [
    "clear_request_context",
    "configure_logging",
    "get_logger",
    "get_path_param",
    "get_query_param",
    "json_response",
    "parse_json_body",
    "parse_object_body",
    "set_request_context",
]
