"""
Logging configuration.

The packaged YAML config (`src/profilescore/config/logging.yaml`) is applied with
`dictConfig`, after overriding every level from settings (`PROFILESCORE_LOG_LEVEL`).
The notifier's extra levels (`SILLY`, `VERBOSE`) are registered first so a level
name like "verbose" is accepted in settings.
"""

from __future__ import annotations

import copy
import logging.config

from profilescore.config.settings import get_logging_config, get_settings
from profilescore.core.log import register_levels


def configure_logging(level: str | None = None) -> None:
    """Configure stdlib logging; `level` wins over the configured `app.log_level`."""
    register_levels()
    # The cached config is shared, so work on a copy.
    config = copy.deepcopy(get_logging_config())

    level = (level or get_settings().app.log_level).upper()
    config.setdefault("root", {})["level"] = level
    for handler in config.get("handlers", {}).values():
        if isinstance(handler, dict) and "level" in handler:
            handler["level"] = level

    logging.config.dictConfig(config)
