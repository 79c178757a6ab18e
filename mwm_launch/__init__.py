"""
mwm-launch: nested Xephyr dev session for mwm
Runs the window manager build against a throwaway X display
"""

import subprocess
from importlib import metadata
from pathlib import Path

_DISTRIBUTION = "mwm-launch"
_RELEASE = "0.1.0"


def _release_get() -> str:
    """Installed distribution version; the source release when not installed"""
    try:
        return metadata.version(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return _RELEASE


def _checkoutRevision_get() -> str | None:
    """Short commit of the source checkout, None outside a git work tree"""
    repo_path = Path(__file__).resolve().parent.parent
    if not (repo_path / ".git").exists():
        return None
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short=7", "HEAD"],
            cwd=repo_path,
            capture_output=True,
            text=True,
            timeout=1,
        )
    except (OSError, subprocess.SubprocessError):
        return None
    revision = result.stdout.strip()
    return revision if result.returncode == 0 and revision else None


def version_get() -> str:
    """Release version, with a PEP 440 local '+g<commit>' part in a checkout"""
    revision = _checkoutRevision_get()
    release = _release_get()
    return f"{release}+g{revision}" if revision else release


__version__ = version_get()
__author__ = "mwm contributors"
