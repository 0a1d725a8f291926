"""Remote HR API access."""

from .client import AdminApiClient, extract_error_message, parse_body

__all__ = ["AdminApiClient", "extract_error_message", "parse_body"]
