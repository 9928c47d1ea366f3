from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _get_env(name: str, default: Optional[str] = None) -> str:
    val = os.getenv(name, default)
    if val is None or val.strip() == "":
        raise RuntimeError(f"Missing required environment variable: {name}")
    return val.strip()


def _parse_origins(raw: str) -> list[str]:
    raw = (raw or "").strip()
    if not raw or raw == "*":
        return ["*"]
    return [o.strip() for o in raw.split(",") if o.strip()]


@dataclass(frozen=True)
class Settings:
    database_url: str
    auth_service_url: str
    cors_origins: list[str]
    log_level: str
    port: int


def load_settings() -> Settings:
    return Settings(
        database_url=_get_env("DATABASE_URL", "sqlite:///./quiz.db"),
        auth_service_url=_get_env("AUTH_SERVICE_URL", "http://auth-service:8001").rstrip("/"),
        cors_origins=_parse_origins(os.getenv("CORS_ORIGINS", "*")),
        log_level=_get_env("LOG_LEVEL", "INFO").upper(),
        port=int(_get_env("PORT", "8004")),
    )
