"""Application settings singleton - single source of truth for constants

This module provides a singleton Settings class that consolidates:
1. Process handling constants (grace periods, exit status codes)
2. X11 filesystem locations

Runtime configuration from mwm-launch.yml is not stored here; the loaded
Config is passed explicitly from cli.main down to the session.

Usage:
    from mwm_launch.common.settings import settings

    process.wait(timeout=settings.TERMINATE_GRACE_SEC)
"""

from typing import Optional


class Settings:
    """Singleton holder for launcher constants

    The singleton pattern ensures all parts of the application use the same
    values, and lets tests patch one place.
    """

    _instance: Optional["Settings"] = None

    def __new__(cls) -> "Settings":
        """Ensure only one Settings instance exists"""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    # =========================================================================
    # X11 Constants
    # =========================================================================

    X11_SOCKET_DIR: str = "/tmp/.X11-unix"
    """Directory where local X servers create their listening sockets

    Display ':N' is reachable at X11_SOCKET_DIR/XN once the server is up.
    """

    X11_LOCK_DIR: str = "/tmp"
    """Directory holding X server lock files

    A running server for display ':N' owns X11_LOCK_DIR/.XN-lock.
    """

    # =========================================================================
    # Process Constants
    # =========================================================================

    TERMINATE_GRACE_SEC: float = 5.0
    """How long to wait for the nested server after SIGTERM (seconds)

    If Xephyr is still running after this, it is killed with SIGKILL.
    """

    SIGNAL_EXIT_OFFSET: int = 128
    """Offset added to a signal number when a child dies by signal

    Matches the value a POSIX shell reports in $? for signalled children.
    """

    COMMAND_NOT_FOUND_STATUS: int = 127
    """Status reported when the child executable does not exist (shell convention)"""

    COMMAND_NOT_EXECUTABLE_STATUS: int = 126
    """Status reported when the child executable exists but cannot be run"""

    INTERRUPTED_EXIT_STATUS: int = 130
    """Launcher exit status after Ctrl-C (128 + SIGINT)"""

    MS_PER_SECOND: float = 1000.0
    """Convert poll_interval_ms from config to seconds for time.sleep()"""


# Global singleton instance
settings = Settings()
"""Global settings singleton instance

Import this anywhere in the application:
    from mwm_launch.common.settings import settings
"""
