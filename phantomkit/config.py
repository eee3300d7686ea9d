"""Environment-driven settings.

Every knob has a module-level default and can be overridden by an
environment variable:

    PHANTOMKIT_LOG_LEVEL            — log level (default: INFO)
    PHANTOMKIT_LOG_FORMAT           — console | json (default: console)
    PHANTOMKIT_RUNTIME_ISOLATION    — v8 | wasm (default: v8)
    PHANTOMKIT_RUNTIME_TIMEOUT_MS   — execution timeout (default: 30000)
    PHANTOMKIT_RUNTIME_MEMORY_MB    — memory ceiling (default: 128)
"""

from __future__ import annotations

import os

ENV_LOG_LEVEL = "PHANTOMKIT_LOG_LEVEL"
ENV_LOG_FORMAT = "PHANTOMKIT_LOG_FORMAT"
ENV_RUNTIME_ISOLATION = "PHANTOMKIT_RUNTIME_ISOLATION"
ENV_RUNTIME_TIMEOUT_MS = "PHANTOMKIT_RUNTIME_TIMEOUT_MS"
ENV_RUNTIME_MEMORY_MB = "PHANTOMKIT_RUNTIME_MEMORY_MB"

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "console"

DEFAULT_ISOLATION = "v8"
DEFAULT_TIMEOUT_MS = 30000
DEFAULT_MEMORY_MB = 128
VALID_ISOLATIONS = ("v8", "wasm")


def env_str(key: str, default: str) -> str:
    return os.environ.get(key, default)


def env_int(key: str, default: int) -> int:
    """Read an integer setting; malformed values raise ``ValueError``."""
    return int(os.environ.get(key, default))


def log_level() -> str:
    return env_str(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL).upper()


def log_format() -> str:
    return env_str(ENV_LOG_FORMAT, DEFAULT_LOG_FORMAT).lower()
