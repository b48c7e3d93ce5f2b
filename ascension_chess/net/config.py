from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from .framing import DEFAULT_MAX_FRAME


@dataclass(frozen=True)
class RelayConfig:
    host: str = "0.0.0.0"
    port: int = 8080
    max_rooms: int = 1000
    room_timeout: float = 600.0
    rate_window: float = 60.0
    rate_max: int = 30
    max_frame: int = DEFAULT_MAX_FRAME
    cleanup_interval: float = 60.0

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RelayConfig":
        """Defaults overridden by ``ASCENSION_RELAY_*`` variables."""
        env = os.environ if environ is None else environ
        base = cls()

        def get(name: str, conv, default: Any) -> Any:
            raw = env.get(f"ASCENSION_RELAY_{name}")
            if raw is None or raw == "":
                return default
            try:
                return conv(raw)
            except ValueError:
                raise ValueError(f"Bad value for ASCENSION_RELAY_{name}: {raw!r}") from None

        cfg = cls(
            host=get("HOST", str, base.host),
            port=get("PORT", int, base.port),
            max_rooms=get("MAX_ROOMS", int, base.max_rooms),
            room_timeout=get("ROOM_TIMEOUT", float, base.room_timeout),
            rate_window=get("RATE_WINDOW", float, base.rate_window),
            rate_max=get("RATE_MAX", int, base.rate_max),
            max_frame=get("MAX_FRAME", int, base.max_frame),
            cleanup_interval=get("CLEANUP_INTERVAL", float, base.cleanup_interval),
        )
        cfg.validate()
        return cfg

    def with_overrides(self, **kwargs: Any) -> "RelayConfig":
        cfg = replace(self, **{k: v for k, v in kwargs.items() if v is not None})
        cfg.validate()
        return cfg

    def validate(self) -> None:
        if not (0 <= self.port <= 65535):
            raise ValueError(f"Bad relay port: {self.port}")
        for name in ("max_rooms", "rate_max", "max_frame"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be positive")
        for name in ("room_timeout", "rate_window", "cleanup_interval"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
