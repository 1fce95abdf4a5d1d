"""Settings loaded from environment variables.

REDIS_URL names the task store. When it is unset, the older REDIS_HOST /
REDIS_PORT pair is used instead.
"""

import os
from dataclasses import dataclass

DEFAULT_REDIS_HOST = "localhost"
DEFAULT_REDIS_PORT = 6379
DEFAULT_PORT = 8080


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    redis_url: str
    port: int
    log_level: str

    @staticmethod
    def from_env() -> "Settings":
        redis_url = os.getenv("REDIS_URL")
        if not redis_url:
            host = os.getenv("REDIS_HOST") or DEFAULT_REDIS_HOST
            port = _env_int("REDIS_PORT", DEFAULT_REDIS_PORT)
            redis_url = f"redis://{host}:{port}/0"
        return Settings(
            redis_url=redis_url,
            port=_env_int("PORT", DEFAULT_PORT),
            log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        )
