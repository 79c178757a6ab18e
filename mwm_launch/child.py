"""
Child build/run command helpers.

This module owns the child process contract: which environment the child
sees, the argv it is started with, and how its exit status is reported.
The invoking process environment is never modified.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from typing import Mapping, Sequence

from mwm_launch.common.config import ChildConfig
from mwm_launch.common.settings import settings
from mwm_launch.common.types import DisplayTarget

logger = logging.getLogger(__name__)

__all__ = [
    "ChildCommandError",
    "childEnvironment_build",
    "childCommand_build",
    "childCommand_run",
    "exitStatus_normalize",
]

DISPLAY_VARIABLE = "DISPLAY"
BACKTRACE_VARIABLE = "RUST_BACKTRACE"


class ChildCommandError(RuntimeError):
    """Child build/run command could not be started

    `exit_status` carries the status a shell would report for the same
    failure: 127 for a missing executable, 126 otherwise.
    """

    def __init__(self, message: str, exit_status: int) -> None:
        super().__init__(message)
        self.exit_status: int = exit_status


def childEnvironment_build(
    base_env: Mapping[str, str], display: DisplayTarget, child_config: ChildConfig
) -> dict[str, str]:
    """
    Build the environment mapping handed to the child.

    Args:
        base_env:
            Invoking environment. Only read, never modified.
        display:
            Nested display the child must connect to.
        child_config:
            Backtrace flag, log variable name and log level default.

    Returns:
        New mapping: a copy of `base_env` with display, backtrace and log
        level set.
    """
    env: dict[str, str] = dict(base_env)
    env[DISPLAY_VARIABLE] = display.name
    env[BACKTRACE_VARIABLE] = child_config.backtrace
    # Unset and empty both fall back to the default, like ${VAR:-default}
    env[child_config.log_variable] = (
        base_env.get(child_config.log_variable) or child_config.log_level_default
    )
    return env


def childCommand_build(command: str, forwarded_args: Sequence[str]) -> list[str]:
    """
    Build child argv from the configured command and forwarded arguments.

    Args:
        command:
            Configured command line, split with shell rules.
        forwarded_args:
            Launcher arguments, appended verbatim in order.

    Returns:
        Child argv.
    """
    return shlex.split(command) + list(forwarded_args)


def exitStatus_normalize(returncode: int) -> int:
    """
    Map a Popen return code to a shell-style exit status.

    Args:
        returncode:
            Child return code; negative means killed by that signal.

    Returns:
        `returncode` when non-negative, else `128 + signal`.
    """
    if returncode < 0:
        return settings.SIGNAL_EXIT_OFFSET - returncode
    return returncode


def childCommand_run(argv: Sequence[str], env: Mapping[str, str]) -> int:
    """
    Run the child in the foreground and wait for it.

    Args:
        argv:
            Child argv.
        env:
            Complete child environment.

    Returns:
        Normalized exit status.

    Raises:
        ChildCommandError: If the executable cannot be started.
    """
    logger.info(f"Running: {shlex.join(argv)}")
    logger.debug(
        "Child environment: %s",
        {key: env.get(key) for key in (DISPLAY_VARIABLE, BACKTRACE_VARIABLE)},
    )
    try:
        completed = subprocess.run(list(argv), env=dict(env))
    except FileNotFoundError as e:
        raise ChildCommandError(
            f"Command not found: '{argv[0]}'", settings.COMMAND_NOT_FOUND_STATUS
        ) from e
    except OSError as e:
        raise ChildCommandError(
            f"Failed to start '{argv[0]}': {e}", settings.COMMAND_NOT_EXECUTABLE_STATUS
        ) from e

    status: int = exitStatus_normalize(completed.returncode)
    if status == 0:
        logger.info("Child exited cleanly")
    else:
        logger.warning(f"Child exited with status {status}")
    return status
