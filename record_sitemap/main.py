"""
1.0 Main Orchestrator Module
Builds a sitemap.xml from a CSV of records, driven by config.json.

Flow:
1. Load and validate configuration
2. Read records from CSV, narrowed by the optional `filter` expression
3. Map each row to a sitemap entry (loc template, lastmod/changefreq/priority columns)
4. Write the urlset XML, or nothing at all if any record fails
"""

import logging
import string
import sys
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

import pandas as pd

from record_sitemap.config import load_config, CONFIG_FILE_PATH
from record_sitemap.errors import ConfigurationError, SitemapError
from record_sitemap.generator import GeneratorConfig, SitemapEntryGenerator
from record_sitemap.record_source import DataFrameRecordSource
from record_sitemap.sitemap_writer import write_sitemap

logger = logging.getLogger(__name__)

LOG_FILE_PATH = "sitemap_process.log"
COLUMN_KEYS = ["skip_column", "lastmod_column", "changefreq_column", "priority_column"]


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = LOG_FILE_PATH) -> None:
    """1.1 Console logging, plus a log file unless log_file is None."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.insert(0, logging.FileHandler(log_file))
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )


def template_fields(template: str) -> List[str]:
    """Names of the {placeholders} used in a str.format template."""
    return [name for _, name, _, _ in string.Formatter().parse(template) if name]


def build_mapping_function(config: Dict[str, Any]) -> Callable[[Dict[str, Any]], Optional[Dict[str, Any]]]:
    """
    2.0 Build the per-row mapping described by the configuration.

    - Rows where `skip_column` is truthy map to nothing (skipped)
    - `loc` comes from `loc_template`; a row with a blank placeholder value
      has no `loc`, which fails the run
    - lastmod/changefreq/priority are copied from their columns when set

    Column names are checked once against the records by check_columns.
    """
    loc_template = config["loc_template"]
    placeholders = template_fields(loc_template)
    skip_column = config.get("skip_column")
    lastmod_column = config.get("lastmod_column")
    changefreq_column = config.get("changefreq_column")
    priority_column = config.get("priority_column")

    def map_row(row: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if skip_column and row.get(skip_column):
            return None

        url_data: Dict[str, Any] = {"loc": None}
        if all(row.get(name) is not None for name in placeholders):
            url_data["loc"] = loc_template.format(**row)

        if lastmod_column and row.get(lastmod_column) is not None:
            url_data["lastmod"] = row[lastmod_column]
        if changefreq_column and row.get(changefreq_column) is not None:
            url_data["changefreq"] = row[changefreq_column]
        if priority_column and row.get(priority_column) is not None:
            url_data["priority"] = row[priority_column]

        return url_data

    return map_row


def build_scope_function(config: Dict[str, Any]) -> Optional[Callable[[pd.DataFrame], pd.DataFrame]]:
    """2.1 Turn the `filter` expression into a DataFrame scope (None when unset)."""
    expression = config.get("filter")
    if not expression:
        return None

    def scope(frame: pd.DataFrame) -> pd.DataFrame:
        try:
            return frame.query(expression)
        except (NameError, SyntaxError, KeyError, TypeError, ValueError) as e:
            # UndefinedVariableError is a NameError
            raise ConfigurationError(f"Invalid filter expression {expression!r}: {e}") from e

    return scope


def check_columns(config: Dict[str, Any], columns: Iterable[str]) -> None:
    """
    2.2 Make sure every column the configuration names exists in the records.

    Raises:
        ConfigurationError: the loc_template or a *_column key names an unknown column
    """
    available = set(columns)
    wanted = template_fields(config["loc_template"]) + [
        config[key] for key in COLUMN_KEYS if config.get(key)
    ]
    missing = [name for name in wanted if name not in available]
    if missing:
        raise ConfigurationError(f"Configuration references unknown column(s): {', '.join(missing)}")


def build_generator(config: Dict[str, Any]) -> SitemapEntryGenerator:
    """2.3 Assemble the generator from a validated configuration."""
    return SitemapEntryGenerator(
        GeneratorConfig(
            mapping_function=build_mapping_function(config),
            scope_function=build_scope_function(config),
            default_changefreq=config.get("default_changefreq"),
            default_priority=config.get("default_priority"),
            strict_changefreq=config.get("strict_changefreq", True),
        )
    )


def run(config: Dict[str, Any]) -> int:
    """
    3.0 Generate and write the sitemap for one configuration.

    Returns:
        Number of entries written

    Raises:
        SitemapError: any configuration or record problem; nothing is written
    """
    generator = build_generator(config)
    source = DataFrameRecordSource.from_csv(config["records_csv"])
    check_columns(config, source.frame.columns)
    entries = generator.generate_from_source(source)
    write_sitemap(entries, config["output_path"])
    return len(entries)


def main(argv: Optional[List[str]] = None) -> int:
    """
    4.0 Command entry point: `record-sitemap [config_path]`.

    Returns a process exit code: 0 on success, 1 when no sitemap was written.
    """
    setup_logging()
    args = sys.argv[1:] if argv is None else argv
    config_path = args[0] if args else CONFIG_FILE_PATH

    logger.info("=" * 60)
    logger.info("Starting sitemap generation")
    logger.info(f"Run timestamp: {datetime.now(timezone.utc).isoformat()}")
    logger.info("=" * 60)

    config = load_config(config_path)
    if not config:
        logger.error("Failed to load configuration. Exiting.")
        return 1

    try:
        count = run(config)
    except SitemapError as e:
        logger.error(f"Sitemap not written: {type(e).__name__}: {e}")
        return 1
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        logger.error(f"Sitemap not written: I/O error: {e}")
        return 1

    logger.info(f"Sitemap generation completed: {count:,} URLs in {config['output_path']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
