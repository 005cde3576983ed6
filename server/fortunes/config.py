"""Server configuration.

Loads from config.yaml if present, with environment variable overrides.
Environment variables use the pattern: FORTUNES_<SECTION>_<KEY> (uppercase).
The backend host can also be given as REDIS_DNS; leaving it unset runs the
server in local-only mode.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 9000
    env: str = "dev"  # "dev" or "prod"


@dataclass
class BackendConfig:
    host: str | None = None  # None: no backend, defaults only
    port: int = 6379
    timeout_seconds: float = 2.0
    key: str = "fortunes"


@dataclass
class LoggingConfig:
    level: str = "info"
    format: str = "console"  # "console" or "json"


@dataclass
class AppConfig:
    server: ServerConfig = field(default_factory=ServerConfig)
    backend: BackendConfig = field(default_factory=BackendConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _apply_env_overrides(config: AppConfig) -> None:
    """Override config values from environment variables."""
    mapping = {
        "FORTUNES_SERVER_HOST": lambda v: setattr(config.server, "host", v),
        "FORTUNES_SERVER_PORT": lambda v: setattr(config.server, "port", int(v)),
        "FORTUNES_SERVER_ENV": lambda v: setattr(config.server, "env", v),
        "REDIS_DNS": lambda v: setattr(config.backend, "host", v or None),
        "FORTUNES_BACKEND_HOST": lambda v: setattr(config.backend, "host", v or None),
        "FORTUNES_BACKEND_PORT": lambda v: setattr(config.backend, "port", int(v)),
        "FORTUNES_BACKEND_TIMEOUT": lambda v: setattr(config.backend, "timeout_seconds", float(v)),
        "FORTUNES_BACKEND_KEY": lambda v: setattr(config.backend, "key", v),
        "FORTUNES_LOG_LEVEL": lambda v: setattr(config.logging, "level", v),
        "FORTUNES_LOG_FORMAT": lambda v: setattr(config.logging, "format", v),
    }
    for env_key, setter in mapping.items():
        val = os.environ.get(env_key)
        if val is not None:
            setter(val)


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load configuration from YAML file + environment overrides."""
    config = AppConfig()

    if config_path is None:
        config_path = Path("config.yaml")
    else:
        config_path = Path(config_path)

    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}

        for section in ("server", "backend", "logging"):
            target = getattr(config, section)
            for k, v in (raw.get(section) or {}).items():
                if hasattr(target, k):
                    setattr(target, k, v)

    # Environment overrides always win
    _apply_env_overrides(config)
    return config
