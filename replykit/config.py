"""
Config system - typed response configuration with layered loading.

Precedence (later overrides earlier):
defaults < .env file < environment variables < manual overrides
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import dotenv_values

from .faults import ConfigError


@dataclass(frozen=True)
class ResponseConfig:
    """
    Defaults used by ResponseWriter and FileDelivery.

    Attributes:
        string_type: MIME alias applied to ``str`` bodies ("text" -> text/plain,
            "html" -> text/html)
        jsonp_callback: Callback name used when ``jsonp`` gets none
        redirect_status: Status used when ``redirect`` gets none
        disposition: Disposition type used when ``attachment`` gets none
        failure_status: Status sent when a file delivery fails before streaming
        chunk_size: Read size when streaming files
        expose_error_details: Send the raw filesystem error (errno, code,
            syscall, path) in failed-delivery bodies
    """

    string_type: str = "text"
    jsonp_callback: str = "callback"
    redirect_status: int = 302
    disposition: str = "attachment"
    failure_status: int = 503
    chunk_size: int = 64 * 1024
    expose_error_details: bool = True

    def merge(self, **overrides: Any) -> "ResponseConfig":
        """Return a copy with ``overrides`` applied and validated."""
        return ConfigLoader.instantiate({**self.to_dict(), **overrides})

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class ConfigLoader:
    """
    Loads ResponseConfig from multiple sources with precedence:
    overrides > environment variables > .env file > defaults
    """

    def __init__(self, env_prefix: str = "REPLYKIT_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        env_prefix: str = "REPLYKIT_",
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> ResponseConfig:
        """
        Build a ResponseConfig.

        Args:
            env_prefix: Prefix for environment variables (REPLYKIT_CHUNK_SIZE)
            env_file: Path to .env file
            overrides: Manual overrides (highest precedence)

        Returns:
            Validated ResponseConfig
        """
        loader = cls(env_prefix=env_prefix)

        if env_file:
            loader._load_env_file(env_file)

        loader._load_from_env()

        if overrides:
            loader.config_data.update(overrides)

        return cls.instantiate(loader.config_data)

    def _load_env_file(self, path: str) -> None:
        """Load config from .env file."""
        env_path = Path(path)
        if not env_path.exists():
            return

        for key, value in dotenv_values(env_path).items():
            if key.startswith(self.env_prefix) and value is not None:
                self._set(key, value)

    def _load_from_env(self) -> None:
        """Load config from environment variables."""
        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                self._set(key, value)

    def _set(self, key: str, value: str) -> None:
        """REPLYKIT_CHUNK_SIZE -> chunk_size."""
        name = key[len(self.env_prefix):].lower()
        self.config_data[name] = self._parse_value(value)

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        # Boolean
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        # Number
        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        # JSON
        if value.startswith(("{", "[")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value

    @staticmethod
    def instantiate(data: Dict[str, Any]) -> ResponseConfig:
        """Validate ``data`` against ResponseConfig fields and build it."""
        known = {f.name: f for f in fields(ResponseConfig)}
        values: Dict[str, Any] = {}

        for key, value in data.items():
            if key not in known:
                raise ConfigError(key, "unknown option")

            expected = type(getattr(ResponseConfig, key))
            if expected is bool and value in (0, 1) and not isinstance(value, bool):
                value = bool(value)
            if expected is int and isinstance(value, bool):
                raise ConfigError(key, f"expected int, got {value!r}")
            if not isinstance(value, expected):
                raise ConfigError(key, f"expected {expected.__name__}, got {type(value).__name__}")
            values[key] = value

        config = replace(ResponseConfig(), **values)

        if config.chunk_size <= 0:
            raise ConfigError("chunk_size", "must be positive")
        return config


__all__ = ["ResponseConfig", "ConfigLoader"]
