"""Runtime settings for Catalogo, read from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigError(Exception):
    """Raised when an environment setting is malformed."""


@dataclass(frozen=True)
class Settings:
    """Catalogo settings.

    Attributes:
        db_path: SQLite database file. ":memory:" for an in-memory store.
        log_dir: Directory for rotating log files.
        log_level: Level name for the catalogo logger.
        store_timeout: Seconds a store call may wait on a locked database.
        cache_enabled: When False every read goes straight to the store.
        host: Bind address for the API server.
        port: Bind port for the API server.
    """

    db_path: str = "catalogo.db"
    log_dir: str = "logs"
    log_level: str = "INFO"
    store_timeout: float = 5.0
    cache_enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from CATALOGO_* environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            Settings with defaults for anything not set.

        Raises:
            ConfigError: If a numeric or boolean variable cannot be parsed.
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            db_path=env.get("CATALOGO_DB_PATH", defaults.db_path),
            log_dir=env.get("CATALOGO_LOG_DIR", defaults.log_dir),
            log_level=env.get("CATALOGO_LOG_LEVEL", defaults.log_level).upper(),
            store_timeout=_parse_float(env, "CATALOGO_STORE_TIMEOUT", defaults.store_timeout),
            cache_enabled=_parse_bool(env, "CATALOGO_CACHE_ENABLED", defaults.cache_enabled),
            host=env.get("CATALOGO_HOST", defaults.host),
            port=_parse_int(env, "CATALOGO_PORT", defaults.port),
        )


def _parse_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got '{raw}'")


def _parse_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got '{raw}'") from e
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got '{raw}'")
    return value


def _parse_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got '{raw}'") from e
