"""Pytest configuration and shared fixtures for mwm-launch tests

This module provides common fixtures and test utilities used across
unit and integration tests.
"""

import logging
from pathlib import Path

import pytest

from mwm_launch.common.config import Config, ConfigLoader


@pytest.fixture
def sample_config() -> Config:
    """Load the shipped mwm-launch.yml

    Returns:
        Config object with the documented defaults
    """
    config_path = Path(__file__).parent.parent / "mwm-launch.yml"
    if not config_path.exists():
        pytest.skip("mwm-launch.yml not found - required for this test")
    return ConfigLoader.config_load(config_path)


@pytest.fixture
def clean_launch_env(monkeypatch) -> None:
    """Remove launcher variables so host settings cannot leak into tests"""
    monkeypatch.delenv(ConfigLoader.CONFIG_PATH_ENV, raising=False)
    for variable in ("MWM_LAUNCH_DISPLAY", "MWM_LAUNCH_RESOLUTION",
                     "MWM_LAUNCH_COMMAND", "MWM_LAUNCH_LOG_LEVEL"):
        monkeypatch.delenv(variable, raising=False)


@pytest.fixture(autouse=True)
def setup_logging(caplog):
    """Setup logging for tests"""
    caplog.set_level(logging.DEBUG)


# Markers for test organization
def pytest_configure(config) -> None:
    """Register custom pytest markers used by this test suite."""
    config.addinivalue_line("markers", "requires_x11: mark test as requiring X11 display")
