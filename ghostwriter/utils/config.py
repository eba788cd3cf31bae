#!/usr/bin/env python3
"""config.py - Configuration loading for GhostWriter

Reads ghostwriter_config.yaml from a config directory and merges it over
the built-in defaults.

Author: GhostWriter Team
License: MIT
Python: 3.11+
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "ghostwriter_config.yaml"


def default_config() -> Dict[str, Any]:
    """Default configuration."""
    return {
        "database_path": "ghostwriter.db",
        "parser": "whatsapp",
        "strategies": [
            "TopicExtractionStrategy",
            "ActionItemStrategy",
            "QuestionDetectionStrategy",
            "StatisticsStrategy",
        ],
        "supported_extensions": [".txt"],
        "max_file_size_bytes": 10 * 1024 * 1024,
        "output_dir": None,
        "export_formats": ["txt"],
        "log_level": "WARNING",
    }


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from a directory.

    Args:
        config_path: Directory holding ghostwriter_config.yaml. None means
            defaults only.

    Returns:
        Configuration dict with every default key present
    """
    defaults = default_config()
    if config_path is None:
        return defaults

    config_file = Path(config_path) / CONFIG_FILENAME
    config_data: Any = {}
    if config_file.exists():
        logger.info("Loading configuration from %s", config_file)
        try:
            with open(config_file, encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
            if config_data is None:
                config_data = {}
                logger.warning("Configuration file %s is empty. Using defaults.", config_file)
        except (OSError, yaml.YAMLError) as e:
            logger.error("Error loading configuration file %s: %s", config_file, e)
            config_data = {}
    else:
        logger.info("Configuration file %s not found. Using default configuration.", config_file)

    if not isinstance(config_data, dict):
        logger.warning(
            "Configuration data was not a mapping (type: %s). Using defaults.",
            type(config_data).__name__,
        )
        config_data = {}

    final_config = {**defaults, **config_data}
    logger.debug("Final configuration: %s", final_config)
    return final_config
