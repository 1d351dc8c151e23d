"""
Record Sitemap - Source Package

Modules:
- entry: changefreq constants, RawEntry / SitemapEntry value types, lastmod formatting
- generator: SitemapEntryGenerator, records in, ordered sitemap entries out
- record_source: record backends (iterables, pandas DataFrames, SQLAlchemy models)
- sitemap_writer: urlset XML rendering with lxml
- config: Configuration loading and validation
- main: config-driven CSV -> sitemap.xml command
"""

__version__ = "1.0.0"

from record_sitemap.entry import (
    CHANGEFREQ_ALWAYS,
    CHANGEFREQ_DAILY,
    CHANGEFREQ_HOURLY,
    CHANGEFREQ_MONTHLY,
    CHANGEFREQ_NEVER,
    CHANGEFREQ_VALUES,
    CHANGEFREQ_WEEKLY,
    CHANGEFREQ_YEARLY,
    RawEntry,
    SitemapEntry,
)
from record_sitemap.errors import (
    ConfigurationError,
    MalformedFieldError,
    MissingRequiredFieldError,
    SitemapError,
)
from record_sitemap.generator import GeneratorConfig, SitemapEntryGenerator
