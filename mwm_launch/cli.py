"""mwm-launch command-line interface"""

import logging
import os
import sys
from typing import NoReturn, Optional, Sequence

from mwm_launch import __version__
from mwm_launch.bootstrap import configFromEnvironment_load, loggingWithConfig_setup
from mwm_launch.common.config import Config
from mwm_launch.common.settings import settings
from mwm_launch.launch_logging import logging_setup
from mwm_launch.session import session_run

logger = logging.getLogger(__name__)


def exitStatus_resolve(config: Config, child_status: int) -> int:
    """
    Pick the launcher's own exit status.

    Args:
        config: Loaded config.
        child_status: Child exit status.

    Returns:
        Child status when propagation is enabled, else 0.
    """
    if config.child.propagate_exit_status:
        return child_status
    return 0


def main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main entry point for mwm-launch

    Every argument is forwarded to the child command untouched; the
    launcher itself is configured through mwm-launch.yml and MWM_LAUNCH_*
    environment variables.

    Args:
        argv: Arguments to forward, defaults to sys.argv[1:].
    """
    forwarded_args: list[str] = list(sys.argv[1:] if argv is None else argv)

    try:
        config: Config = configFromEnvironment_load(os.environ)
        loggingWithConfig_setup(config, logging_setup)
        logger.info(
            f"mwm-launch {__version__}: {config.child.command} on {config.display.name} "
            f"({config.display.resolution})"
        )
        child_status: int = session_run(config, forwarded_args, os.environ)
        sys.exit(exitStatus_resolve(config, child_status))

    except KeyboardInterrupt:
        print("\nShutting down...", file=sys.stderr)
        sys.exit(settings.INTERRUPTED_EXIT_STATUS)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
