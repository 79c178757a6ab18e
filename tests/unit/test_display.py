"""Unit tests for X11 display readiness probing"""

from __future__ import annotations

from unittest.mock import Mock, patch

from Xlib import error as xerror

from mwm_launch.common.types import DisplayTarget
from mwm_launch.x11 import display as display_module
from mwm_launch.x11.display import DisplayProbe


def _probe(tmp_path, name: str = ":3") -> DisplayProbe:
    return DisplayProbe(
        DisplayTarget.name_parse(name), socket_dir=str(tmp_path), lock_dir=str(tmp_path)
    )


class TestDisplayProbeSocket:
    """Tests for unix socket detection."""

    def test_socketMissing_notReady(self, tmp_path) -> None:
        assert _probe(tmp_path).socket_exists() is False

    def test_socketPresent_detected(self, tmp_path) -> None:
        (tmp_path / "X3").touch()
        assert _probe(tmp_path).socket_exists() is True

    def test_remoteDisplay_skipsSocketCheck(self, tmp_path) -> None:
        assert _probe(tmp_path, "otherhost:3").socket_exists() is True

    def test_defaultSocketDir_fromSettings(self) -> None:
        probe = DisplayProbe(DisplayTarget.name_parse(":3"))
        assert probe._socket_dir == "/tmp/.X11-unix"
        assert probe._lock_dir == "/tmp"


class TestDisplayProbeOccupied:
    """Tests for detecting a display number held by another server."""

    def test_freeDisplay(self, tmp_path) -> None:
        assert _probe(tmp_path).occupied_check() is False

    def test_lockFile_marksOccupied(self, tmp_path) -> None:
        (tmp_path / ".X3-lock").touch()
        assert _probe(tmp_path).occupied_check() is True

    def test_socket_marksOccupied(self, tmp_path) -> None:
        (tmp_path / "X3").touch()
        assert _probe(tmp_path).occupied_check() is True

    def test_otherDisplayNumber_ignored(self, tmp_path) -> None:
        (tmp_path / ".X4-lock").touch()
        (tmp_path / "X4").touch()
        assert _probe(tmp_path).occupied_check() is False


class TestDisplayProbeConnection:
    """Tests for the python-xlib connection check."""

    def test_connectionSucceeds_closesDisplay(self, tmp_path) -> None:
        """A successful handshake must close the probe connection."""
        conn = Mock()
        conn.screen.return_value = Mock(width_in_pixels=800, height_in_pixels=600)
        with patch.object(display_module.xdisplay, "Display", return_value=conn) as display_cls:
            assert _probe(tmp_path).connection_check() is True

        display_cls.assert_called_once_with(":3")
        conn.close.assert_called_once_with()

    def test_connectionRefused_returnsFalse(self, tmp_path) -> None:
        with patch.object(
            display_module.xdisplay,
            "Display",
            side_effect=xerror.DisplayConnectionError(":3", "Connection refused"),
        ):
            assert _probe(tmp_path).connection_check() is False

    def test_socketError_returnsFalse(self, tmp_path) -> None:
        with patch.object(display_module.xdisplay, "Display", side_effect=ConnectionRefusedError()):
            assert _probe(tmp_path).connection_check() is False

    def test_readyCheck_skipsXlibWithoutSocket(self, tmp_path) -> None:
        with patch.object(display_module.xdisplay, "Display") as display_cls:
            assert _probe(tmp_path).ready_check() is False
        display_cls.assert_not_called()


class TestDisplayProbeWait:
    """Tests for bounded readiness polling."""

    def test_readyOnThirdProbe(self, tmp_path) -> None:
        probe = _probe(tmp_path)
        probe.ready_check = Mock(side_effect=[False, False, True])  # type: ignore[method-assign]
        with patch.object(display_module.time, "sleep") as sleep:
            assert probe.ready_wait(timeout=10.0, poll_interval=0.05) is True
        assert sleep.call_count == 2
        sleep.assert_called_with(0.05)

    def test_timeout_returnsFalse(self, tmp_path) -> None:
        """Polling must stop once the deadline passes."""
        probe = _probe(tmp_path)
        probe.ready_check = Mock(return_value=False)  # type: ignore[method-assign]
        clock = Mock(side_effect=[0.0, 0.5, 0.9, 1.5])
        with patch.object(display_module.time, "monotonic", clock), patch.object(
            display_module.time, "sleep"
        ) as sleep:
            assert probe.ready_wait(timeout=1.0, poll_interval=0.5) is False
        assert probe.ready_check.call_count == 3
        assert sleep.call_count == 2

    def test_deadServer_stopsEarly(self, tmp_path) -> None:
        probe = _probe(tmp_path)
        probe.ready_check = Mock(return_value=False)  # type: ignore[method-assign]
        is_alive = Mock(return_value=False)
        with patch.object(display_module.time, "sleep") as sleep:
            assert probe.ready_wait(timeout=10.0, poll_interval=0.05, is_alive=is_alive) is False
        is_alive.assert_called_once_with()
        sleep.assert_not_called()

    def test_foreignDisplayAnswers_whileServerDead_notReady(self, tmp_path) -> None:
        """A live display is not ours once our server process has exited."""
        (tmp_path / "X3").touch()
        conn = Mock()
        conn.screen.return_value = Mock(width_in_pixels=1920, height_in_pixels=1080)
        is_alive = Mock(return_value=False)
        with patch.object(display_module.xdisplay, "Display", return_value=conn) as display_cls:
            ready = _probe(tmp_path).ready_wait(timeout=10.0, poll_interval=0.05, is_alive=is_alive)
        assert ready is False
        display_cls.assert_not_called()

    def test_serverDiesDuringCheck_notReady(self, tmp_path) -> None:
        """Liveness is re-checked after the display answers."""
        probe = _probe(tmp_path)
        probe.ready_check = Mock(return_value=True)  # type: ignore[method-assign]
        is_alive = Mock(side_effect=[True, False])
        assert probe.ready_wait(timeout=10.0, poll_interval=0.05, is_alive=is_alive) is False
        assert is_alive.call_count == 2

    def test_aliveServer_ready(self, tmp_path) -> None:
        probe = _probe(tmp_path)
        probe.ready_check = Mock(return_value=True)  # type: ignore[method-assign]
        is_alive = Mock(return_value=True)
        assert probe.ready_wait(timeout=10.0, poll_interval=0.05, is_alive=is_alive) is True
        assert is_alive.call_count == 2
