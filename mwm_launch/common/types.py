"""Common types and data structures for mwm-launch"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

_DISPLAY_NAME_RE = re.compile(r"^(?P<host>[^:]*):(?P<number>\d+)(?:\.(?P<screen>\d+))?$")
_GEOMETRY_RE = re.compile(r"^(?P<width>\d+)x(?P<height>\d+)$")

_LOCAL_HOSTS = {"", "unix"}


@dataclass(frozen=True)
class ScreenGeometry:
    """Screen dimensions handed to the nested server"""
    width: int
    height: int

    @staticmethod
    def string_parse(text: str) -> "ScreenGeometry":
        """
        Parse a WIDTHxHEIGHT geometry string

        Args:
            text: Geometry such as '800x600'

        Returns:
            Parsed screen geometry

        Raises:
            ValueError: If text is not WIDTHxHEIGHT with positive sizes
        """
        match = _GEOMETRY_RE.match(text.strip())
        if match is None:
            raise ValueError(f"Invalid resolution '{text}': expected WIDTHxHEIGHT")
        width = int(match.group("width"))
        height = int(match.group("height"))
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid resolution '{text}': sizes must be positive")
        return ScreenGeometry(width=width, height=height)

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class DisplayTarget:
    """X11 display address, e.g. ':3' or 'localhost:3.0'"""
    name: str
    host: str
    number: int
    screen: Optional[int] = None

    @staticmethod
    def name_parse(name: str) -> "DisplayTarget":
        """
        Parse an X11 display name

        Args:
            name: Display name in [host]:number[.screen] form

        Returns:
            Parsed display target

        Raises:
            ValueError: If name is not a valid display name
        """
        match = _DISPLAY_NAME_RE.match(name.strip())
        if match is None:
            raise ValueError(f"Invalid display name '{name}': expected [host]:number[.screen]")
        screen = match.group("screen")
        return DisplayTarget(
            name=name.strip(),
            host=match.group("host"),
            number=int(match.group("number")),
            screen=int(screen) if screen is not None else None,
        )

    def isLocal(self) -> bool:
        """Check if display is served over a local unix socket"""
        return self.host in _LOCAL_HOSTS

    def socketPath_get(self, socket_dir: str) -> Optional[Path]:
        """
        Get the unix socket path the X server listens on

        Args:
            socket_dir: Directory holding X11 sockets (usually /tmp/.X11-unix)

        Returns:
            Socket path, or None for remote displays
        """
        if not self.isLocal():
            return None
        return Path(socket_dir) / f"X{self.number}"

    def lockPath_get(self, lock_dir: str) -> Optional[Path]:
        """
        Get the lock file path an X server creates for this display

        Args:
            lock_dir: Directory holding X lock files (usually /tmp)

        Returns:
            Lock file path, or None for remote displays
        """
        if not self.isLocal():
            return None
        return Path(lock_dir) / f".X{self.number}-lock"

    @property
    def serverName(self) -> str:
        """Name an X server binds to: ':N' without host or screen"""
        return f":{self.number}"

    def __str__(self) -> str:
        return self.name
