"""
Logging setup.

The packaged `config/logging.yaml` is a plain `dictConfig` mapping. The effective
level comes from (highest first) an explicit argument such as the CLI's
`--log-level`, then `app.log_level` (which `SAFESPHERE_LOG_LEVEL` overrides).
"""

from __future__ import annotations

import copy
import logging.config
from typing import Any

from safesphere.config.settings import get_logging_config, get_settings


def build_logging_config(level: str) -> dict[str, Any]:
    """Return a fresh copy of the packaged config with root and handlers set to `level`."""
    # get_logging_config() is cached; never edit it in place.
    config = copy.deepcopy(get_logging_config())
    level = level.upper()
    config.setdefault("root", {})["level"] = level
    for handler in config.get("handlers", {}).values():
        if isinstance(handler, dict) and "level" in handler:
            handler["level"] = level
    return config


def configure_logging(level: str | None = None) -> None:
    logging.config.dictConfig(build_logging_config(level or get_settings().app.log_level))
