"""
Error types raised while building sitemap entries.

Every error derives from SitemapError so callers can refuse to publish a
sitemap on any failure with a single except clause.
"""

from typing import Any, Optional


class SitemapError(Exception):
    """Base class for all record_sitemap errors."""


class ConfigurationError(SitemapError):
    """Raised at setup time when the generator cannot be configured."""


class MissingRequiredFieldError(SitemapError):
    """A non-empty mapping result lacks a required field (only `loc` today)."""

    def __init__(self, field: str, record_index: Optional[int] = None):
        self.field = field
        self.record_index = record_index
        where = f" (record #{record_index})" if record_index is not None else ""
        super().__init__(f"Required field `{field}` isn't set{where}.")


class MalformedFieldError(SitemapError):
    """A mapping result carries a value the sitemap protocol cannot represent."""

    def __init__(self, field: str, value: Any, reason: str, record_index: Optional[int] = None):
        self.field = field
        self.value = value
        self.reason = reason
        self.record_index = record_index
        where = f" (record #{record_index})" if record_index is not None else ""
        super().__init__(f"Malformed `{field}` value {value!r}: {reason}{where}.")
