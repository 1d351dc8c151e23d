"""
1.0 Sitemap Entry Generator Module
Turns a sequence of records into an ordered list of sitemap entries.

Key features:
- Caller-supplied mapping function, one call per record
- Records whose mapping is empty are skipped silently
- All-or-nothing runs: a bad mapping result aborts with no partial output
- Configured changefreq/priority fallbacks for fields the mapping omits
- Optional scope function applied to a RecordSource before records are read
"""

import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Iterable, List, Mapping, Optional, TYPE_CHECKING

from record_sitemap.entry import (
    CHANGEFREQ_VALUES,
    RawEntry,
    SitemapEntry,
    format_w3c_datetime,
    is_number,
)
from record_sitemap.errors import ConfigurationError, MalformedFieldError, MissingRequiredFieldError

if TYPE_CHECKING:
    from record_sitemap.record_source import RecordSource

logger = logging.getLogger(__name__)

MappingFunction = Callable[[Any], Any]
ScopeFunction = Callable[[Any], Any]


@dataclass(frozen=True)
class GeneratorConfig:
    """
    2.0 GeneratorConfig
    Settings for one generator; never changes during a run.

    Attributes:
        mapping_function: record -> RawEntry | dict | None
        scope_function: narrows the record query before it runs (see RecordSource.fetch)
        default_changefreq: used when the mapping omits changefreq
        default_priority: used when the mapping omits priority (0.0 is a real default)
        strict_changefreq: reject changefreq values outside the protocol enumeration
    """

    mapping_function: Optional[MappingFunction] = None
    scope_function: Optional[ScopeFunction] = None
    default_changefreq: Optional[str] = None
    default_priority: Optional[float] = None
    strict_changefreq: bool = True


def _is_priority(value: Any) -> bool:
    """Finite real numbers only; nan and inf have no <priority> rendering."""
    if isinstance(value, Decimal):
        return value.is_finite()
    return is_number(value) and math.isfinite(value)


class SitemapEntryGenerator:
    """
    3.0 SitemapEntryGenerator Class
    Validates its configuration once, then maps records to entries on demand.
    """

    def __init__(self, config: GeneratorConfig):
        """
        3.1 Validate the configuration.

        Raises:
            ConfigurationError: mapping function missing or not callable, scope
                function not callable, or an unusable default value
        """
        if config.mapping_function is None or not callable(config.mapping_function):
            raise ConfigurationError("mapping_function must be a callable taking one record.")

        if config.scope_function is not None and not callable(config.scope_function):
            raise ConfigurationError("scope_function must be callable when set.")

        if config.default_changefreq is not None:
            if not isinstance(config.default_changefreq, str):
                raise ConfigurationError(
                    f"default_changefreq must be a string, got {type(config.default_changefreq).__name__}."
                )
            if config.strict_changefreq and config.default_changefreq not in CHANGEFREQ_VALUES:
                raise ConfigurationError(
                    f"default_changefreq {config.default_changefreq!r} is not one of {', '.join(CHANGEFREQ_VALUES)}."
                )

        if config.default_priority is not None and not _is_priority(config.default_priority):
            raise ConfigurationError(
                f"default_priority must be a finite number, got {config.default_priority!r}."
            )

        self.config = config
        logger.debug(
            f"SitemapEntryGenerator initialized: "
            f"default_changefreq={config.default_changefreq}, "
            f"default_priority={config.default_priority}, "
            f"strict_changefreq={config.strict_changefreq}"
        )

    def generate(self, records: Iterable[Any]) -> List[SitemapEntry]:
        """
        3.2 Map every record to at most one entry, keeping record order.

        Args:
            records: the already-scoped records, consumed once

        Returns:
            Entries for the records whose mapping was non-empty

        Raises:
            MissingRequiredFieldError: a non-empty mapping result has no `loc`
            MalformedFieldError: a mapping result holds a value that cannot be emitted
        """
        entries: List[SitemapEntry] = []
        seen = 0

        for index, record in enumerate(records):
            seen += 1
            raw = self.config.mapping_function(record)

            if not raw:
                logger.debug(f"Record #{index} mapped to nothing, skipping")
                continue

            entries.append(self._build_entry(self._coerce(raw, index), index))

        logger.info(
            f"Generated {len(entries):,} sitemap entries from {seen:,} records "
            f"({seen - len(entries):,} skipped)"
        )
        return entries

    def generate_from_source(self, source: "RecordSource") -> List[SitemapEntry]:
        """
        3.3 Fetch records through the configured scope, then generate.

        Errors raised by the source or the scope function propagate as they are.
        """
        records = source.fetch(self.config.scope_function)
        return self.generate(records)

    # =========================================================================
    # 4.0 ENTRY CONSTRUCTION
    # =========================================================================

    @staticmethod
    def _coerce(raw: Any, index: int) -> RawEntry:
        if isinstance(raw, RawEntry):
            return raw
        if isinstance(raw, Mapping):
            return RawEntry.from_mapping(raw)
        raise MalformedFieldError(
            "mapping result", raw, "expected a RawEntry or a mapping", record_index=index
        )

    def _build_entry(self, raw: RawEntry, index: int) -> SitemapEntry:
        """4.1 Apply field checks and fallbacks to one mapping result."""
        if raw.loc is None or raw.loc == "":
            raise MissingRequiredFieldError("loc", record_index=index)
        if not isinstance(raw.loc, str):
            raise MalformedFieldError("loc", raw.loc, "expected a string", record_index=index)

        lastmod = None
        if raw.lastmod is not None:
            try:
                lastmod = format_w3c_datetime(raw.lastmod)
            except (TypeError, ValueError) as e:
                raise MalformedFieldError("lastmod", raw.lastmod, str(e), record_index=index) from e

        changefreq = raw.changefreq if raw.changefreq is not None else self.config.default_changefreq
        if raw.changefreq is not None:
            if not isinstance(raw.changefreq, str):
                raise MalformedFieldError("changefreq", raw.changefreq, "expected a string", record_index=index)
            if self.config.strict_changefreq and raw.changefreq not in CHANGEFREQ_VALUES:
                raise MalformedFieldError(
                    "changefreq",
                    raw.changefreq,
                    f"expected one of {', '.join(CHANGEFREQ_VALUES)}",
                    record_index=index,
                )

        priority = raw.priority if raw.priority is not None else self.config.default_priority
        if raw.priority is not None and not _is_priority(raw.priority):
            raise MalformedFieldError("priority", raw.priority, "expected a finite number", record_index=index)

        return SitemapEntry(loc=raw.loc, lastmod=lastmod, changefreq=changefreq, priority=priority)
