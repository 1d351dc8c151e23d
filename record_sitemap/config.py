import json
import logging
import math
import os
from typing import Dict, Optional, Any

from record_sitemap.entry import CHANGEFREQ_VALUES, is_number

logger = logging.getLogger(__name__)

CONFIG_FILE_PATH = "config.json"
DEFAULT_OUTPUT_PATH = "sitemap.xml"

OPTIONAL_STRING_KEYS = ["lastmod_column", "changefreq_column", "priority_column", "filter", "skip_column", "output_path"]

def load_config(path: str = CONFIG_FILE_PATH) -> Optional[Dict[str, Any]]:
    """Loads the configuration from a JSON file (config.json by default)."""
    if not os.path.exists(path):
        logger.error(f"Configuration file not found: {path}")
        return None
    try:
        with open(path, 'r') as f:
            config_data = json.load(f)
        logger.info(f"Successfully loaded configuration from {path}")
        if not validate_config(config_data):
            return None
        config_data.setdefault("output_path", DEFAULT_OUTPUT_PATH)
        config_data.setdefault("strict_changefreq", True)
        return config_data
    except json.JSONDecodeError as e:
        logger.error(f"Error decoding JSON from {path}: {e}")
        return None
    except OSError as e:
        logger.error(f"Could not read configuration file {path}: {e}")
        return None

def validate_config(config: Dict[str, Any]) -> bool:
    """Validates the structure and content of the configuration."""
    if not isinstance(config, dict):
        logger.error("Configuration must be a dictionary.")
        return False

    for key in ["records_csv", "loc_template"]:
        if key not in config:
            logger.error(f"Configuration is missing required key: '{key}'.")
            return False
        if not isinstance(config[key], str) or not config[key].strip():
            logger.error(f"Value for key '{key}' must be a non-empty string.")
            return False

    for key in OPTIONAL_STRING_KEYS:
        if key in config and (not isinstance(config[key], str) or not config[key].strip()):
            logger.error(f"Value for key '{key}' must be a non-empty string when set.")
            return False

    strict = config.get("strict_changefreq", True)
    if not isinstance(strict, bool):
        logger.error("'strict_changefreq' must be true or false.")
        return False

    default_changefreq = config.get("default_changefreq")
    if default_changefreq is not None:
        if not isinstance(default_changefreq, str):
            logger.error("'default_changefreq' must be a string.")
            return False
        if strict and default_changefreq not in CHANGEFREQ_VALUES:
            logger.error(
                f"'default_changefreq' must be one of {', '.join(CHANGEFREQ_VALUES)}, got '{default_changefreq}'."
            )
            return False

    default_priority = config.get("default_priority")
    if default_priority is not None:
        if not is_number(default_priority) or not math.isfinite(default_priority):
            logger.error("'default_priority' must be a finite number.")
            return False
        if not 0.0 <= default_priority <= 1.0:
            # Protocol range; the generator itself does not enforce it.
            logger.warning(f"'default_priority' {default_priority} is outside 0.0-1.0.")

    logger.info("Configuration validation successful.")
    return True
