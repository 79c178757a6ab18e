"""
Dev session orchestration.

One session is: start the nested display, run the child against it, print
the child's exit status, stop the nested display.
"""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional, Sequence

from mwm_launch.child import (
    ChildCommandError,
    childCommand_build,
    childCommand_run,
    childEnvironment_build,
)
from mwm_launch.common.config import Config
from mwm_launch.x11.nested import NestedDisplayServer

logger = logging.getLogger(__name__)

__all__ = ["session_run"]


def session_run(
    config: Config,
    forwarded_args: Sequence[str],
    environ: Optional[Mapping[str, str]] = None,
) -> int:
    """
    Run one dev session.

    Args:
        config:
            Loaded configuration.
        forwarded_args:
            Arguments passed through to the child command unchanged.
        environ:
            Invoking environment, defaults to `os.environ`. Read only.

    Returns:
        Child exit status (also printed to stdout). A child that cannot
        be started reports 127 (not found) or 126 (not executable).

    Raises:
        NestedDisplayError: If the nested display cannot be brought up.
    """
    base_env: Mapping[str, str] = os.environ if environ is None else environ
    child_env: dict[str, str] = childEnvironment_build(
        base_env, config.display.target, config.child
    )
    argv: list[str] = childCommand_build(config.child.command, forwarded_args)

    with NestedDisplayServer(config.display) as server:
        logger.debug(f"Session on {config.display.name} (server pid {server.pid})")
        try:
            status: int = childCommand_run(argv, child_env)
        except ChildCommandError as e:
            logger.error(str(e))
            status = e.exit_status
        print(status, flush=True)
    return status
