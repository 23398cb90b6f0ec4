"""Server settings read from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .transport.tcp_connection import DEFAULT_PORT

ENV_HOST = "MAGICHOME_HOST"
ENV_PORT = "MAGICHOME_PORT"
ENV_TIMEOUT = "MAGICHOME_TIMEOUT"
ENV_LOG_LEVEL = "MAGICHOME_LOG_LEVEL"

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass
class Settings:
    """Defaults used when a tool call omits connection details."""

    host: str | None = None
    port: int = DEFAULT_PORT
    timeout: float | None = None
    log_level: str = "INFO"


def _parse_number(env: Mapping[str, str], name: str, kind):
    raw = env.get(name, "").strip()
    if not raw:
        return None
    try:
        return kind(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build ``Settings`` from ``env`` (defaults to ``os.environ``).

    Raises:
        ValueError: If a numeric variable cannot be parsed or is out of range.
    """
    if env is None:
        env = os.environ

    settings = Settings()
    settings.host = env.get(ENV_HOST, "").strip() or None

    port = _parse_number(env, ENV_PORT, int)
    if port is not None:
        if not 0 < port <= 65535:
            raise ValueError(f"{ENV_PORT} must be 1-65535, got {port}")
        settings.port = port

    timeout = _parse_number(env, ENV_TIMEOUT, float)
    if timeout is not None:
        if timeout <= 0:
            raise ValueError(f"{ENV_TIMEOUT} must be positive, got {timeout}")
        settings.timeout = timeout

    log_level = env.get(ENV_LOG_LEVEL, "").strip().upper() or "INFO"
    if log_level not in LOG_LEVELS:
        raise ValueError(
            f"{ENV_LOG_LEVEL} must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}"
        )
    settings.log_level = log_level
    return settings
