"""Nested X server (Xephyr) process lifecycle"""

from __future__ import annotations

import logging
import shlex
import subprocess
from typing import Optional

from mwm_launch.common.config import DisplayConfig
from mwm_launch.common.settings import settings
from mwm_launch.x11.display import DisplayProbe

logger = logging.getLogger(__name__)

__all__ = [
    "NestedDisplayError",
    "DisplayNotReadyError",
    "NestedDisplayServer",
]


class NestedDisplayError(RuntimeError):
    """Nested X server could not be started or exited unexpectedly"""


class DisplayNotReadyError(NestedDisplayError):
    """Nested X server did not accept connections within the timeout"""


class NestedDisplayServer:
    """
    Owns one nested X server process.

    Used as a context manager: entering starts the server and waits until
    the display accepts connections, leaving terminates it. Termination runs
    on every exit path, including a failed readiness wait.
    """

    def __init__(self, display_config: DisplayConfig, probe: Optional[DisplayProbe] = None) -> None:
        """
        Initialize nested display server

        Args:
            display_config: Display name, resolution, extensions and server command
            probe: Readiness probe, defaults to a DisplayProbe for the configured display
        """
        self._config: DisplayConfig = display_config
        self._probe: DisplayProbe = probe or DisplayProbe(display_config.target)
        self._process: Optional[subprocess.Popen[bytes]] = None

    @property
    def pid(self) -> Optional[int]:
        """Process id of the running server, None before start / after teardown"""
        return self._process.pid if self._process is not None else None

    def serverCommand_build(self) -> list[str]:
        """
        Build the nested server argv

        Returns:
            e.g. ['Xephyr', '+extension', 'RANDR', '-screen', '800x600', ':3']
        """
        argv: list[str] = shlex.split(self._config.server_command)
        for extension in self._config.extensions:
            argv.extend(["+extension", extension])
        argv.extend(["-screen", str(self._config.geometry)])
        argv.extend(self._config.server_args)
        argv.append(self._config.target.serverName)
        return argv

    def isRunning(self) -> bool:
        """Check if the server process is still alive"""
        return self._process is not None and self._process.poll() is None

    def process_start(self) -> None:
        """
        Spawn the nested server in the background

        Raises:
            NestedDisplayError: If the display is already taken or the server
                executable cannot be started
        """
        if self._process is not None:
            return

        if self._probe.occupied_check():
            raise NestedDisplayError(
                f"Display {self._config.name} is already in use by another X server"
            )

        argv = self.serverCommand_build()
        logger.info(f"Starting nested display: {shlex.join(argv)}")
        try:
            self._process = subprocess.Popen(argv)
        except OSError as e:
            raise NestedDisplayError(f"Failed to start '{argv[0]}': {e}") from e
        logger.debug(f"Nested display server pid {self._process.pid}")

    def ready_wait(self) -> None:
        """
        Block until the nested display accepts connections

        Raises:
            NestedDisplayError: If the server exits before becoming ready
            DisplayNotReadyError: If the timeout elapses first
        """
        if self._process is None:
            raise NestedDisplayError("Nested display server not started")

        ready = self._probe.ready_wait(
            timeout=self._config.ready_timeout_seconds,
            poll_interval=self._config.poll_interval_ms / settings.MS_PER_SECOND,
            is_alive=self.isRunning,
        )
        if ready:
            logger.info(f"Nested display {self._config.name} ready")
            return

        returncode = self._process.poll()
        if returncode is not None:
            raise NestedDisplayError(
                f"Nested display server exited with status {returncode} "
                f"before {self._config.name} became ready"
            )
        raise DisplayNotReadyError(
            f"Display {self._config.name} not ready after "
            f"{self._config.ready_timeout_seconds:g}s"
        )

    def process_terminate(self) -> None:
        """
        Send SIGTERM to the server once and reap it

        Escalates to SIGKILL if the server outlives the grace period. A
        server that already exited is not an error.
        """
        process = self._process
        if process is None:
            return
        self._process = None

        if process.poll() is not None:
            logger.debug(f"Nested display server {process.pid} already exited ({process.returncode})")
        process.terminate()
        try:
            process.wait(timeout=settings.TERMINATE_GRACE_SEC)
        except subprocess.TimeoutExpired:
            logger.warning(
                f"Nested display server {process.pid} ignored SIGTERM for "
                f"{settings.TERMINATE_GRACE_SEC:g}s, killing"
            )
            process.kill()
            process.wait()
        logger.info(f"Nested display {self._config.name} stopped")

    def __enter__(self) -> "NestedDisplayServer":
        """Context manager entry: start and wait for readiness"""
        self.process_start()
        try:
            self.ready_wait()
        except BaseException:
            self.process_terminate()
            raise
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        """Context manager exit"""
        self.process_terminate()
