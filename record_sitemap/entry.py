"""
1.0 Sitemap Entry Module
Value types shared by the generator, the record sources and the XML writer.

Key features:
- changefreq constants from the sitemaps.org protocol
- RawEntry: what a mapping function hands back for one record
- SitemapEntry: one finished <url> element, immutable
- W3C datetime formatting for lastmod
"""

import numbers
from dataclasses import dataclass, fields
from datetime import date, datetime, timezone
from typing import Any, Dict, Mapping, Optional, Union

# 1.1 Allowed <changefreq> values
CHANGEFREQ_ALWAYS = "always"
CHANGEFREQ_HOURLY = "hourly"
CHANGEFREQ_DAILY = "daily"
CHANGEFREQ_WEEKLY = "weekly"
CHANGEFREQ_MONTHLY = "monthly"
CHANGEFREQ_YEARLY = "yearly"
CHANGEFREQ_NEVER = "never"

CHANGEFREQ_VALUES = (
    CHANGEFREQ_ALWAYS,
    CHANGEFREQ_HOURLY,
    CHANGEFREQ_DAILY,
    CHANGEFREQ_WEEKLY,
    CHANGEFREQ_MONTHLY,
    CHANGEFREQ_YEARLY,
    CHANGEFREQ_NEVER,
)

LastmodValue = Union[int, float, datetime, date]


def is_number(value: Any) -> bool:
    """True for real numbers (numpy scalars included), False for bools."""
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def format_w3c_datetime(value: LastmodValue) -> str:
    """
    2.0 Format a lastmod value as a W3C datetime string in UTC.

    Accepts epoch seconds (int or float) or a datetime/date. Naive datetimes
    are taken to be UTC already. Fractional seconds are dropped.

    Raises:
        TypeError: value is not a number, datetime or date
        ValueError: value is a number that cannot be turned into a datetime
    """
    if is_number(value):
        try:
            moment = datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError) as e:
            raise ValueError(f"timestamp out of range: {e}") from e
    elif isinstance(value, datetime):
        moment = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
        moment = moment.astimezone(timezone.utc)
    elif isinstance(value, date):
        moment = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    else:
        raise TypeError(f"expected epoch seconds or a datetime, got {type(value).__name__}")

    return moment.isoformat(timespec="seconds")


@dataclass(frozen=True)
class RawEntry:
    """
    3.0 RawEntry
    The per-record result of a mapping function. Every field is optional;
    an entry with no fields set means "skip this record".
    """

    loc: Optional[str] = None
    lastmod: Optional[LastmodValue] = None
    changefreq: Optional[str] = None
    priority: Optional[float] = None

    def __bool__(self) -> bool:
        return any(getattr(self, f.name) is not None for f in fields(self))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RawEntry":
        """Build from a plain dict; keys other than the four protocol fields are ignored."""
        return cls(
            loc=data.get("loc"),
            lastmod=data.get("lastmod"),
            changefreq=data.get("changefreq"),
            priority=data.get("priority"),
        )


@dataclass(frozen=True)
class SitemapEntry:
    """
    4.0 SitemapEntry
    One <url> element of a urlset. Only `loc` is required.
    """

    loc: str
    lastmod: Optional[str] = None
    changefreq: Optional[str] = None
    priority: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Fields that are set, in protocol order."""
        result: Dict[str, Any] = {"loc": self.loc}
        for name in ("lastmod", "changefreq", "priority"):
            value = getattr(self, name)
            if value is not None:
                result[name] = value
        return result
