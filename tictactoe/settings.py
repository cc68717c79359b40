from __future__ import annotations

import os
from dataclasses import dataclass


ENV_PREFIX = "TICTACTOE_"


@dataclass(frozen=True, slots=True)
class ServerSettings:
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # Max frames buffered for a subscriber that isn't reading; beyond that it's dropped.
    channel_buffer_size: int = 64
    # Idle streams get a comment frame this often; None disables it.
    keepalive_seconds: float | None = 15.0

    # Subscribing to an unknown game id creates that game (otherwise: not found).
    create_on_subscribe: bool = True


def _env(name: str) -> str | None:
    return os.environ.get(f"{ENV_PREFIX}{name}")


def _env_flag(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def settings_from_env() -> ServerSettings:
    defaults = ServerSettings()
    keepalive = float(_env("KEEPALIVE_SECONDS") or defaults.keepalive_seconds or 0)
    return ServerSettings(
        host=_env("HOST") or defaults.host,
        port=int(_env("PORT") or defaults.port),
        log_level=(_env("LOG_LEVEL") or defaults.log_level).upper(),
        channel_buffer_size=int(_env("CHANNEL_BUFFER") or defaults.channel_buffer_size),
        keepalive_seconds=keepalive if keepalive > 0 else None,
        create_on_subscribe=_env_flag("CREATE_ON_SUBSCRIBE", defaults.create_on_subscribe),
    )
