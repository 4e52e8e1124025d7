"""Static academic portfolio builder with an allow-list HTML sanitizer."""

from .sanitize import ALLOWED_ATTRIBUTES, ALLOWED_TAGS, escape_text, sanitize

__all__ = ["ALLOWED_ATTRIBUTES", "ALLOWED_TAGS", "escape_text", "sanitize"]
__version__ = "0.1.0"
