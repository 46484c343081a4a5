from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable
from urllib.parse import urlparse

from dotenv import load_dotenv

ENV_PREFIX = "AMS_"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    env_name: str
    api_base_url: str
    connect_timeout_seconds: float = 5.0
    read_timeout_seconds: float = 15.0
    retries: int = 3
    retry_backoff_seconds: float = 0.3
    max_connections: int = 20
    verify_ssl: bool = True
    cache_ttl_seconds: float = 3.0
    default_page_size: int = 10

    @property
    def normalized_env(self) -> str:
        return self.env_name.lower().strip()


def _number(name: str, default: float, parse: Callable[[str], float], minimum: float, *, inclusive: bool) -> float:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        value = parse(raw.strip())
    except ValueError as exc:
        kind = "an integer" if parse is int else "a number"
        raise ConfigError(f"Invalid {ENV_PREFIX}{name}: expected {kind}, got {raw!r}") from exc
    if value < minimum or (not inclusive and value == minimum):
        bound = ">=" if inclusive else ">"
        raise ConfigError(f"Invalid {ENV_PREFIX}{name}: expected {bound} {minimum:g}, got {value:g}")
    return value


def _flag(name: str, default: bool) -> bool:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _base_url(env_name: str) -> str:
    """``AMS_API_BASE_URL_<ENV>`` wins over ``AMS_API_BASE_URL``; there is no built-in default."""
    candidates = (f"{ENV_PREFIX}API_BASE_URL_{env_name.upper()}", f"{ENV_PREFIX}API_BASE_URL")
    for key in candidates:
        value = (os.getenv(key) or "").strip()
        if value:
            parsed = urlparse(value)
            if parsed.scheme not in {"http", "https"} or not parsed.netloc:
                raise ConfigError(f"Invalid {key}: expected an http(s) URL, got {value!r}")
            return value.rstrip("/")
    raise ConfigError(f"Missing required config values: {ENV_PREFIX}API_BASE_URL")


def load_config(env_file: str | None = None) -> ClientConfig:
    """Reads ``AMS_*`` settings from the environment, after loading ``env_file`` (or ``./.env``)."""
    load_dotenv(env_file)
    env_name = (os.getenv(ENV_PREFIX + "ENV") or "dev").strip()

    timeout = _number("TIMEOUT_SECONDS", 10.0, float, 0, inclusive=False)
    connect_timeout = _number("CONNECT_TIMEOUT_SECONDS", min(timeout, 5.0), float, 0, inclusive=False)
    read_timeout = _number("READ_TIMEOUT_SECONDS", max(timeout, connect_timeout), float, 0, inclusive=False)

    return ClientConfig(
        env_name=env_name,
        api_base_url=_base_url(env_name),
        connect_timeout_seconds=connect_timeout,
        read_timeout_seconds=read_timeout,
        retries=int(_number("RETRIES", 3, int, 0, inclusive=True)),
        retry_backoff_seconds=_number("RETRY_BACKOFF_SECONDS", 0.3, float, 0, inclusive=True),
        max_connections=int(_number("MAX_CONNECTIONS", 20, int, 1, inclusive=True)),
        verify_ssl=_flag("VERIFY_SSL", True),
        cache_ttl_seconds=_number("CACHE_TTL_SECONDS", 3.0, float, 0, inclusive=True),
        default_page_size=int(_number("PAGE_SIZE", 10, int, 1, inclusive=True)),
    )
