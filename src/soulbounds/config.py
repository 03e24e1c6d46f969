from __future__ import annotations

import logging
import os
from dataclasses import dataclass

DEFAULT_CORS_ORIGINS: tuple[str, ...] = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)

_LOG_FORMAT = "%(asctime)s %(levelname)-5s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    """Process settings, read from `SOULBOUNDS_*` environment variables.

    Notes:
    - `admin_token=None` means every caller is treated as an administrator.
    - `url` is only used by `run()` to attach to an already running server.
    """

    url: str = ""
    admin_token: str | None = None
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS
    event_log_size: int = 1024


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be > 0, got {value}")
    return value


def load_settings() -> Settings:
    origins_raw = os.getenv("SOULBOUNDS_CORS_ORIGINS", "").strip()
    origins = tuple(o.strip() for o in origins_raw.split(",") if o.strip()) if origins_raw else DEFAULT_CORS_ORIGINS
    token = os.getenv("SOULBOUNDS_ADMIN_TOKEN", "").strip() or None

    return Settings(
        url=os.getenv("SOULBOUNDS_URL", "").strip(),
        admin_token=token,
        log_level=(os.getenv("SOULBOUNDS_LOG_LEVEL", "").strip() or "INFO").upper(),
        cors_origins=origins,
        event_log_size=_env_int("SOULBOUNDS_EVENT_LOG_SIZE", 1024),
    )


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach one stream handler to the `soulbounds` logger (idempotent)."""

    logger = logging.getLogger("soulbounds")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = resolved
    logger.setLevel(level)

    if not any(getattr(h, "_soulbounds", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        handler._soulbounds = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
