"""Runtime configuration read from ``KONANE_*`` environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from functools import lru_cache

_LOGGER = logging.getLogger(__name__)

ENV_PREFIX = "KONANE_"

DEFAULT_WHITE_PORT = 2222
DEFAULT_BLACK_PORT = 2223
DEFAULT_PROTOCOL_TIMEOUT_MS = 22222
DEFAULT_TIME_GRACE_MS = 250


@dataclass(frozen=True, slots=True)
class KonaneConfig:
    """Settings shared by the coordinator, the peer client and the CLI.

    Args:
        white_port: TCP port the WHITE peer listens on.
        black_port: TCP port the BLACK peer listens on.
        protocol_timeout_ms: Deadline for every handshake and turn read.
        time_grace_ms: How far below zero a side's budget may fall, as
            measured by the coordinator, before it loses on time.
        verbose: Surface rule-violation reasons on the display sink.
        log_level: Root logging level name used by the CLI.
    """

    white_port: int = DEFAULT_WHITE_PORT
    black_port: int = DEFAULT_BLACK_PORT
    protocol_timeout_ms: int = DEFAULT_PROTOCOL_TIMEOUT_MS
    time_grace_ms: int = DEFAULT_TIME_GRACE_MS
    verbose: bool = False
    log_level: str = "INFO"

    def with_overrides(self, **changes: object) -> KonaneConfig:
        """Return a copy with every non-``None`` entry of *changes* applied."""
        applied = {key: value for key, value in changes.items() if value is not None}
        if not applied:
            return self
        return replace(self, **applied)


def _env(name: str) -> str | None:
    value = os.environ.get(ENV_PREFIX + name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        _LOGGER.warning("Ignoring %s%s=%r: not an integer", ENV_PREFIX, name, raw)
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.lower() in ("1", "true", "yes", "on")


def load_config() -> KonaneConfig:
    """Build a fresh :class:`KonaneConfig` from the current environment."""
    return KonaneConfig(
        white_port=_env_int("WHITE_PORT", DEFAULT_WHITE_PORT),
        black_port=_env_int("BLACK_PORT", DEFAULT_BLACK_PORT),
        protocol_timeout_ms=_env_int(
            "PROTOCOL_TIMEOUT_MS", DEFAULT_PROTOCOL_TIMEOUT_MS
        ),
        time_grace_ms=_env_int("TIME_GRACE_MS", DEFAULT_TIME_GRACE_MS),
        verbose=_env_bool("VERBOSE", False),
        log_level=(_env("LOG_LEVEL") or "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_config() -> KonaneConfig:
    """Process-wide configuration, read once."""
    return load_config()
