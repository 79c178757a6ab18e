"""X11 display readiness probing"""

import logging
import time
from typing import Callable, Optional

from Xlib import display as xdisplay
from Xlib import error as xerror

from mwm_launch.common.settings import settings
from mwm_launch.common.types import DisplayTarget

logger = logging.getLogger(__name__)


class DisplayProbe:
    """Checks whether an X11 display accepts client connections"""

    def __init__(
        self,
        target: DisplayTarget,
        socket_dir: Optional[str] = None,
        lock_dir: Optional[str] = None,
    ) -> None:
        """
        Initialize display probe

        Args:
            target: Display to probe (e.g., ':3')
            socket_dir: X11 socket directory, defaults to settings.X11_SOCKET_DIR
            lock_dir: X11 lock file directory, defaults to settings.X11_LOCK_DIR
        """
        self._target: DisplayTarget = target
        self._socket_dir: str = socket_dir or settings.X11_SOCKET_DIR
        self._lock_dir: str = lock_dir or settings.X11_LOCK_DIR

    @property
    def target(self) -> DisplayTarget:
        return self._target

    def socket_exists(self) -> bool:
        """
        Check if the display's unix socket has been created

        Returns:
            True when the socket exists, or the display is remote
            (remote displays have no local socket to wait for)
        """
        socket_path = self._target.socketPath_get(self._socket_dir)
        if socket_path is None:
            return True
        return socket_path.exists()

    def occupied_check(self) -> bool:
        """
        Check if some X server already holds this display number

        Returns:
            True when the lock file or the socket for the display exists
        """
        lock_path = self._target.lockPath_get(self._lock_dir)
        socket_path = self._target.socketPath_get(self._socket_dir)
        return any(path is not None and path.exists() for path in (lock_path, socket_path))

    def connection_check(self) -> bool:
        """
        Open and immediately close an X11 connection

        Returns:
            True if the X server completed the connection handshake
        """
        try:
            conn = xdisplay.Display(self._target.name)
        except (xerror.DisplayError, OSError) as e:
            logger.debug(f"Display {self._target} not accepting connections yet: {e}")
            return False
        try:
            screen = conn.screen()
            logger.debug(
                f"Display {self._target} up: {screen.width_in_pixels}x{screen.height_in_pixels}"
            )
        finally:
            conn.close()
        return True

    def ready_check(self) -> bool:
        """Check socket first so the common not-yet-started case skips Xlib"""
        return self.socket_exists() and self.connection_check()

    def ready_wait(
        self,
        timeout: float,
        poll_interval: float,
        is_alive: Optional[Callable[[], bool]] = None,
    ) -> bool:
        """
        Poll until the display accepts connections or the timeout elapses

        Args:
            timeout: Maximum time to wait (seconds)
            poll_interval: Delay between probes (seconds)
            is_alive: Optional callback; polling stops early when it
                returns False (the server process died). A display that
                answers while the server is dead belongs to someone else
                and does not count as ready.

        Returns:
            True if the display became ready while the server was alive,
            False on timeout or if the server died
        """
        deadline = time.monotonic() + timeout
        attempts = 0
        while True:
            attempts += 1
            if is_alive is not None and not is_alive():
                logger.debug(f"Server for {self._target} exited during readiness wait")
                return False
            if self.ready_check():
                # Server may have exited between the liveness check and the probe
                if is_alive is not None and not is_alive():
                    logger.debug(f"Display {self._target} answered but our server is gone")
                    return False
                logger.debug(f"Display {self._target} ready after {attempts} probe(s)")
                return True
            if time.monotonic() >= deadline:
                return False
            time.sleep(poll_interval)
