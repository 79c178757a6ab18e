"""Configuration file loading and management"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from mwm_launch.common.types import DisplayTarget, ScreenGeometry


@dataclass
class DisplayConfig:
    """Nested display server settings"""
    name: str = ":3"
    resolution: str = "800x600"
    extensions: List[str] = field(default_factory=lambda: ["RANDR"])
    server_command: str = "Xephyr"
    server_args: List[str] = field(default_factory=list)
    ready_timeout_seconds: float = 10.0
    poll_interval_ms: int = 50

    @property
    def target(self) -> DisplayTarget:
        """Parsed display address"""
        return DisplayTarget.name_parse(self.name)

    @property
    def geometry(self) -> ScreenGeometry:
        """Parsed screen resolution"""
        return ScreenGeometry.string_parse(self.resolution)


@dataclass
class ChildConfig:
    """Build/run command settings"""
    command: str = "cargo run"
    backtrace: str = "1"
    log_variable: str = "RUST_LOG"
    log_level_default: str = "debug"
    propagate_exit_status: bool = False


@dataclass
class LoggingConfig:
    """Logging configuration settings"""
    level: str = "INFO"
    file: Optional[str] = None
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class Config:
    """Complete application configuration"""
    display: DisplayConfig = field(default_factory=DisplayConfig)
    child: ChildConfig = field(default_factory=ChildConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader:
    """Loads and parses configuration from YAML files"""

    CONFIG_PATH_ENV = "MWM_LAUNCH_CONFIG"

    _TRUE_STRINGS = {"true", "yes", "on", "1"}
    _FALSE_STRINGS = {"false", "no", "off", "0"}

    DEFAULT_CONFIG_PATHS = [
        "mwm-launch.yml",
        "~/.config/mwm-launch/config.yml",
        "/etc/mwm-launch/config.yml",
    ]

    @staticmethod
    def configFile_find() -> Optional[Path]:
        """
        Find configuration file in standard locations

        Returns:
            Path to config file, or None if not found
        """
        for config_path in ConfigLoader.DEFAULT_CONFIG_PATHS:
            path = Path(config_path).expanduser().resolve()
            if path.exists() and path.is_file():
                return path
        return None

    @staticmethod
    def yaml_load(file_path: Path) -> Dict[str, Any]:
        """
        Load YAML configuration file

        Args:
            file_path: Path to YAML file

        Returns:
            Parsed configuration dictionary

        Raises:
            FileNotFoundError: If file does not exist
            yaml.YAMLError: If file is not valid YAML
        """
        with open(file_path, "r") as f:
            data = yaml.safe_load(f)

        # An empty file means "all defaults"
        if data is None:
            return {}

        if not isinstance(data, dict):
            raise ValueError(f"Config file {file_path} must contain a YAML dictionary")

        return data

    @staticmethod
    def section_get(data: Dict[str, Any], name: str) -> Dict[str, Any]:
        """
        Get an optional config section

        Args:
            data: Raw configuration dictionary
            name: Section key

        Returns:
            Section dictionary, empty if absent

        Raises:
            ValueError: If the section is present but not a dictionary
        """
        section = data.get(name)
        if section is None:
            return {}
        if not isinstance(section, dict):
            raise ValueError(f"Config section '{name}' must be a dictionary")
        return section

    @staticmethod
    def bool_parse(value: Any, key: str) -> bool:
        """
        Parse a boolean config value

        Args:
            value: Raw YAML value (bool, 0/1, or a true/false style string)
            key: Dotted key name for error messages

        Returns:
            Parsed boolean

        Raises:
            ValueError: If value is not recognisably true or false
        """
        if isinstance(value, bool):
            return value
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        if isinstance(value, str):
            token = value.strip().lower()
            if token in ConfigLoader._TRUE_STRINGS:
                return True
            if token in ConfigLoader._FALSE_STRINGS:
                return False
        raise ValueError(f"{key} must be true or false, got {value!r}")

    @staticmethod
    def config_parse(data: Dict[str, Any]) -> Config:
        """
        Parse configuration dictionary into Config object

        Missing sections and keys fall back to the dataclass defaults.

        Args:
            data: Raw configuration dictionary

        Returns:
            Parsed Config object

        Raises:
            ValueError: If a value is malformed
        """
        defaults = Config()

        display_data = ConfigLoader.section_get(data, "display")
        extensions = display_data.get("extensions", defaults.display.extensions)
        if isinstance(extensions, str):
            extensions = [extensions]
        server_args = display_data.get("server_args", defaults.display.server_args)
        if isinstance(server_args, str):
            server_args = [server_args]
        display = DisplayConfig(
            name=str(display_data.get("name", defaults.display.name)),
            resolution=str(display_data.get("resolution", defaults.display.resolution)),
            extensions=[str(ext) for ext in extensions],
            server_command=str(
                display_data.get("server_command", defaults.display.server_command)
            ),
            server_args=[str(arg) for arg in server_args],
            ready_timeout_seconds=float(
                display_data.get("ready_timeout_seconds", defaults.display.ready_timeout_seconds)
            ),
            poll_interval_ms=int(
                display_data.get("poll_interval_ms", defaults.display.poll_interval_ms)
            ),
        )

        child_data = ConfigLoader.section_get(data, "child")
        child = ChildConfig(
            command=str(child_data.get("command", defaults.child.command)),
            backtrace=str(child_data.get("backtrace", defaults.child.backtrace)),
            log_variable=str(child_data.get("log_variable", defaults.child.log_variable)),
            log_level_default=str(
                child_data.get("log_level_default", defaults.child.log_level_default)
            ),
            propagate_exit_status=ConfigLoader.bool_parse(
                child_data.get("propagate_exit_status", defaults.child.propagate_exit_status),
                "child.propagate_exit_status",
            ),
        )

        logging_data = ConfigLoader.section_get(data, "logging")
        logging = LoggingConfig(
            level=str(logging_data.get("level", defaults.logging.level)),
            file=logging_data.get("file", defaults.logging.file),
            format=str(logging_data.get("format", defaults.logging.format)),
        )

        config = Config(display=display, child=child, logging=logging)
        ConfigLoader.config_validate(config)
        return config

    @staticmethod
    def config_validate(config: Config) -> None:
        """
        Validate parsed configuration values

        Args:
            config: Config to check

        Raises:
            ValueError: If any value is out of range or malformed
        """
        # Both properties raise ValueError on malformed input
        target = config.display.target
        _ = config.display.geometry

        # Xephyr binds a bare display number
        if target.host or target.screen is not None:
            raise ValueError(
                f"display.name must be a local display ':N', got '{config.display.name}'"
            )

        if config.display.ready_timeout_seconds <= 0:
            raise ValueError("display.ready_timeout_seconds must be positive")
        if config.display.poll_interval_ms <= 0:
            raise ValueError("display.poll_interval_ms must be positive")
        if not config.display.server_command.strip():
            raise ValueError("display.server_command must not be empty")
        if not config.child.command.strip():
            raise ValueError("child.command must not be empty")
        if not config.child.log_variable:
            raise ValueError("child.log_variable must not be empty")

    @staticmethod
    def config_load(file_path: Optional[Path] = None) -> Config:
        """
        Load configuration from file

        Args:
            file_path: Optional path to config file. If None, checks
                the standard locations and uses built-in defaults when
                nothing is found. MWM_LAUNCH_CONFIG is resolved by the
                caller (see bootstrap.configFromEnvironment_load).

        Returns:
            Parsed Config object

        Raises:
            FileNotFoundError: If an explicitly named config file is missing
            ValueError: If config file is invalid
        """
        if file_path is None:
            file_path = ConfigLoader.configFile_find()
            if file_path is None:
                return ConfigLoader.config_parse({})

        data = ConfigLoader.yaml_load(file_path)
        return ConfigLoader.config_parse(data)

    @staticmethod
    def configWithOverrides_load(
        file_path: Optional[Path] = None,
        **overrides: Any
    ) -> Config:
        """
        Load configuration and apply overrides

        Args:
            file_path: Optional path to config file
            **overrides: Key-value pairs to override config values; None
                values are ignored

        Returns:
            Config object with overrides applied

        Example:
            config = ConfigLoader.configWithOverrides_load(
                display=":5",
                resolution="1024x768"
            )
        """
        config = ConfigLoader.config_load(file_path)

        if overrides.get("display") is not None:
            config.display.name = overrides["display"]
        if overrides.get("resolution") is not None:
            config.display.resolution = overrides["resolution"]
        if overrides.get("command") is not None:
            config.child.command = overrides["command"]
        if overrides.get("log_level") is not None:
            config.logging.level = overrides["log_level"]

        ConfigLoader.config_validate(config)
        return config
