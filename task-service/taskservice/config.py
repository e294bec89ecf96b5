"""Settings for the task service, read from the environment.

A ``.env`` file in the working directory is loaded first so local runs can
keep ``REDIS_URL`` out of the shell.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

from taskservice.errors import ConfigError

DEFAULT_PORT = 5000
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    redis_url: str
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


def load_settings(dotenv: bool = True) -> Settings:
    if dotenv:
        load_dotenv(override=False)
    redis_url = os.getenv("REDIS_URL", "").strip()
    if not redis_url:
        raise ConfigError("REDIS_URL is not defined in the environment")
    origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    return Settings(
        redis_url=redis_url,
        host=os.getenv("HOST", "0.0.0.0"),
        port=_env_int("PORT", DEFAULT_PORT),
        cors_origins=origins or ["*"],
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
