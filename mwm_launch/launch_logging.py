"""
Launcher logging configuration.

Log records go to stderr (and optionally a file) so stdout carries only the
child's exit status. Each record is tagged with the launcher version and
the nested display it manages, which keeps interleaved logs from several
dev sessions on different displays apart.
"""

from __future__ import annotations

import logging
import sys

from mwm_launch import __version__

__all__ = [
    "logging_setup",
    "sessionTag_get",
    "logFormatWithTag_get",
]


def sessionTag_get(display_name: str) -> str:
    """Tag such as '[mwm-launch 0.1.0 :3]'"""
    return f"[mwm-launch {__version__} {display_name}]"


def logFormatWithTag_get(log_format: str, display_name: str) -> str:
    """
    Place the session tag after the timestamp, or in front when the format
    has no timestamp.

    Args:
        log_format:
            Base formatter string.
        display_name:
            Nested display the session runs on.

    Returns:
        Formatter string carrying the session tag exactly once.
    """
    tag: str = sessionTag_get(display_name).replace("%", "%%")
    if "%(asctime)s" in log_format:
        return log_format.replace("%(asctime)s", f"%(asctime)s {tag}", 1)
    return f"{tag} {log_format}"


def logging_setup(
    level: str, log_format: str, log_file: str | None, display_name: str
) -> None:
    """
    Configure launcher logging handlers.

    Args:
        level:
            Level name such as `INFO` or `debug`.
        log_format:
            Base formatter string.
        log_file:
            Optional log file path, appended to.
        display_name:
            Nested display the session runs on.

    Raises:
        ValueError: If `level` is not a logging level name.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level '{level}'")

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=numeric_level,
        format=logFormatWithTag_get(log_format, display_name),
        handlers=handlers,
        force=True,
    )
