"""Configuration management for datadrop."""

from __future__ import annotations

import os
import textwrap
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import CLIOptions, DataDropConfig, LoggingSettings, ParseOptions
from .resolver import ENV_PREFIX, flatten_for_env, resolve_with_precedence

DEFAULT_CONFIG_PATH = Path("~/.datadrop/config.yaml")
_CONFIG_HEADER = textwrap.dedent(
    """\
    # datadrop configuration file
    # Manage with `datadrop config set KEY --value VALUE`.
    """
)


class ConfigManager:
    """Read, write, and resolve the YAML configuration file."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = env if env is not None else os.environ

    @property
    def config_path(self) -> Path:
        """Return the resolved configuration path."""
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        ensure_file: bool = True,
        env_overrides: Mapping[str, str] | None = None,
    ) -> DataDropConfig:
        """Return the effective configuration.

        Args:
            cli_overrides: Dotted-key overrides taking highest precedence.
            include_env: Whether ``DATADROP__*`` variables are applied.
            ensure_file: Create the file with defaults when it is missing.
            env_overrides: Environment mapping used instead of ``os.environ``.

        Raises:
            ConfigError: If the file or any override is invalid.
        """
        if ensure_file:
            self.ensure_exists()

        env_layer = None
        if include_env:
            env_layer = self._from_env(env_overrides if env_overrides is not None else self._env)

        return resolve_with_precedence(
            defaults=DataDropConfig(),
            file_overrides=self._read_file(),
            env_overrides=env_layer or None,
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Return the raw mapping stored on disk."""
        return self._read_file()

    def save(self, config: DataDropConfig | Mapping[str, Any]) -> None:
        """Write configuration data to disk."""
        if isinstance(config, DataDropConfig):
            data = config.model_dump(mode="python")
        else:
            data = dict(config)
        self._write_file(data)

    def ensure_exists(self) -> Path:
        """Create a configuration file holding the defaults if none exists."""
        if not self._config_path.exists():
            self._write_file(DataDropConfig().model_dump(mode="python"))
        return self._config_path

    def read_text(self) -> str:
        """Return the configuration file contents, or an empty string."""
        if not self._config_path.exists():
            return ""
        return self._config_path.read_text(encoding="utf-8")

    def _read_file(self) -> dict[str, Any]:
        if not self._config_path.exists():
            return {}

        try:
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")
        return raw

    def _write_file(self, data: Mapping[str, Any]) -> None:
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        body = yaml.safe_dump(dict(data), sort_keys=False)
        self._config_path.write_text(
            f"{_CONFIG_HEADER}# Last updated: {stamp}\n{body}", encoding="utf-8"
        )

    def _from_env(self, env: Mapping[str, str]) -> dict[str, Any]:
        overrides: dict[str, Any] = {}
        for key, raw_value in env.items():
            if not key.startswith(ENV_PREFIX):
                continue
            dotted = ".".join(part.lower() for part in key[len(ENV_PREFIX) :].split("__") if part)
            if not dotted:
                continue
            try:
                overrides[dotted] = yaml.safe_load(raw_value)
            except yaml.YAMLError:
                overrides[dotted] = raw_value
        return overrides


__all__ = [
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "DataDropConfig",
    "ParseOptions",
    "LoggingSettings",
    "CLIOptions",
    "resolve_with_precedence",
    "flatten_for_env",
    "ConfigError",
]
