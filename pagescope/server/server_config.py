"""Server configuration dataclass."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 3000
    sessions_enabled: bool = True
    cors_origin: str = "*"
