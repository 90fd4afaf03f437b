"""
Connection settings for vappnet.

Settings are resolved from built-in defaults, then the first JSON settings
file found, then ``VAPPNET_*`` environment variables. Command line options
override the result.
"""

import os
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..constants import DEFAULT_VALUES
from .exceptions import ConfigError
from .logging_utils import logger
from .transport import HttpTransport

ENV_PREFIX = "VAPPNET_"

_TRUE_VALUES = ("true", "1", "yes", "on")


class Settings:
    """Connection settings for the vCloud Director API."""

    _defaults: Dict[str, Any] = {
        "api_url": None,
        "api_version": DEFAULT_VALUES["API_VERSION"],
        "auth_token": None,
        "username": None,
        "password": None,
        "verify_ssl": True,
        "timeout": DEFAULT_VALUES["TIMEOUT"],
    }

    def __init__(self, **values: Any):
        unknown = set(values) - set(self._defaults)
        if unknown:
            raise ConfigError(f"Unknown settings: {', '.join(sorted(unknown))}")
        self._values = self._defaults.copy()
        self._values.update(values)

    def __getattr__(self, name: str) -> Any:
        values = self.__dict__.get("_values", {})
        if name in values:
            return values[name]
        raise AttributeError(name)

    @classmethod
    def load(cls, config_file: Optional[str] = None, environ: Optional[Dict[str, str]] = None) -> "Settings":
        """
        Resolve settings from defaults, a settings file and the environment.

        Args:
            config_file: Explicit settings file (optional)
            environ: Environment to read, ``os.environ`` by default

        Returns:
            Resolved settings

        Raises:
            ConfigError: If a settings file cannot be read or holds invalid values
        """
        settings = cls()
        settings._load_from_file(config_file)
        settings._load_from_env(os.environ if environ is None else environ)
        return settings

    @staticmethod
    def default_files() -> List[Path]:
        """Standard settings file locations, in lookup order."""
        return [
            Path.home() / ".vappnet" / "config.json",
            Path.cwd() / ".vappnet.json",
            Path("/etc/vappnet/config.json"),
        ]

    def _load_from_file(self, config_file: Optional[str] = None):
        """Load settings from a JSON file."""
        if config_file is None:
            for file_path in self.default_files():
                if file_path.exists():
                    config_file = str(file_path)
                    break
            else:
                return
        elif not Path(config_file).exists():
            raise ConfigError(f"Settings file not found: {config_file}")

        try:
            with open(config_file, 'r') as f:
                file_values = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigError(f"Failed to load settings from {config_file}: {e}") from e

        if not isinstance(file_values, dict):
            raise ConfigError(f"Settings file {config_file} must contain a JSON object")

        for name, value in file_values.items():
            self.set(name, value)
        logger.debug(f"Loaded settings from {config_file}")

    def _load_from_env(self, environ: Dict[str, str]):
        """Load settings from environment variables."""
        for name in self._defaults:
            env_name = f"{ENV_PREFIX}{name.upper()}"
            if env_name in environ:
                self.set(name, environ[env_name])
                logger.debug(f"Setting '{name}' taken from {env_name}")

    def set(self, name: str, value: Any):
        """
        Set a value, coercing it to the type of the default.

        Raises:
            ConfigError: If the name is unknown or the value cannot be coerced
        """
        if name not in self._defaults:
            raise ConfigError(f"Unknown setting: {name}")

        if name == "verify_ssl" and isinstance(value, str):
            value = value.lower() in _TRUE_VALUES
        elif name == "timeout" and value is not None:
            try:
                value = float(value)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Invalid timeout: {value!r}") from e
        self._values[name] = value

    def update(self, **overrides: Any) -> "Settings":
        """Apply overrides, skipping ``None`` values. Returns self for chaining."""
        for name, value in overrides.items():
            if value is not None:
                self.set(name, value)
        return self

    def require_api_url(self) -> str:
        """
        Return the configured API URL.

        Raises:
            ConfigError: If no API URL is configured
        """
        if not self.api_url:
            raise ConfigError(
                f"No API URL configured; pass --api-url or set {ENV_PREFIX}API_URL"
            )
        return self.api_url

    def as_dict(self, redact: bool = True) -> Dict[str, Any]:
        """Return the settings, with secrets masked unless ``redact`` is False."""
        values = self._values.copy()
        if redact:
            for secret in ("password", "auth_token"):
                if values.get(secret):
                    values[secret] = "********"
        return values


def build_transport(settings: Settings) -> HttpTransport:
    """
    Create an HTTP transport from settings.

    When credentials are configured and no session token is, a session is
    opened right away.

    Raises:
        ConfigError: If no API URL is configured
        TransportError: If the login fails
    """
    transport = HttpTransport(
        settings.require_api_url(),
        auth_token=settings.auth_token,
        api_version=settings.api_version,
        verify_ssl=settings.verify_ssl,
        timeout=settings.timeout,
    )
    if not settings.auth_token and settings.username and settings.password:
        transport.login(settings.username, settings.password)
    return transport
