"""Launcher bootstrap helpers for config and logging.

The invoking environment is the only source for MWM_LAUNCH_* lookups, so an
injected mapping fully determines which config file and overrides apply.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Mapping

from mwm_launch.common.config import Config, ConfigLoader

logger = logging.getLogger(__name__)

# Environment variable -> configWithOverrides_load keyword
ENV_OVERRIDES: dict[str, str] = {
    "MWM_LAUNCH_DISPLAY": "display",
    "MWM_LAUNCH_RESOLUTION": "resolution",
    "MWM_LAUNCH_COMMAND": "command",
    "MWM_LAUNCH_LOG_LEVEL": "log_level",
}


def overrides_collect(environ: Mapping[str, str]) -> dict[str, str]:
    """
    Collect config overrides from launcher environment variables.

    Args:
        environ: Invoking environment.

    Returns:
        Override keyword arguments; empty variables are ignored.
    """
    return {
        key: environ[variable]
        for variable, key in ENV_OVERRIDES.items()
        if environ.get(variable)
    }


def configFromEnvironment_load(environ: Mapping[str, str]) -> Config:
    """
    Load configuration named by the environment and apply its overrides.

    Args:
        environ: Invoking environment.

    Returns:
        Loaded config.
    """
    config_env: str | None = environ.get(ConfigLoader.CONFIG_PATH_ENV)
    config_path: Path | None = Path(config_env).expanduser() if config_env else None
    config: Config = ConfigLoader.configWithOverrides_load(
        file_path=config_path,
        **overrides_collect(environ),
    )
    return config


def loggingWithConfig_setup(
    config: Config, logging_setup_func: Callable[[str, str, str | None, str], None]
) -> None:
    """
    Setup logging from config.

    Args:
        config: Loaded config.
        logging_setup_func: Logging setup callback; also receives the
            display name for the session tag.
    """
    logging_setup_func(
        config.logging.level,
        config.logging.format,
        config.logging.file,
        config.display.name,
    )
