# grain/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv(dotenv_path=os.path.join(os.path.dirname(os.path.dirname(__file__)), ".env"))

DEFAULT_CHAT_MODEL = "gpt-4o-mini"
DEFAULT_CHAT_TEMPERATURE = 0.7
DEFAULT_CHAT_TIMEOUT_SECONDS = 30.0
DEFAULT_SNAPSHOT_KEY = "grain.seed.v1"

_default_webs = ["http://127.0.0.1:3000", "http://localhost:3000"]


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _csv_list(val: str) -> List[str]:
    raw = (val or "").replace(";", ",").replace("\n", ",")
    return [item.strip() for item in raw.split(",") if item.strip()]


def _cors_origins() -> List[str]:
    origins = list(_default_webs)
    app_base = os.getenv("APP_BASE_URL")
    if app_base:
        origins.append(app_base.rstrip("/"))
    for origin in _csv_list(os.getenv("GRAIN_CORS_ORIGINS", "")):
        if origin not in origins:
            origins.append(origin)
    return origins


@dataclass(frozen=True)
class Settings:
    openai_api_key: str = ""
    chat_model: str = DEFAULT_CHAT_MODEL
    chat_temperature: float = DEFAULT_CHAT_TEMPERATURE
    chat_timeout_seconds: float = DEFAULT_CHAT_TIMEOUT_SECONDS
    snapshot_backend: str = "file"
    snapshot_path: str = ".grain/snapshots.json"
    snapshot_key: str = DEFAULT_SNAPSHOT_KEY
    snapshot_collection: str = "grainSnapshots"
    firebase_credentials: str = "firebase-admin.json"
    cors_origins: List[str] = field(default_factory=lambda: list(_default_webs))
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Read settings from the environment (and .env) at call time."""
    return Settings(
        openai_api_key=_env_str("OPENAI_API_KEY", ""),
        chat_model=_env_str("GRAIN_CHAT_MODEL", DEFAULT_CHAT_MODEL),
        chat_temperature=_env_float("GRAIN_CHAT_TEMPERATURE", DEFAULT_CHAT_TEMPERATURE),
        chat_timeout_seconds=_env_float("GRAIN_CHAT_TIMEOUT_SECONDS", DEFAULT_CHAT_TIMEOUT_SECONDS),
        snapshot_backend=_env_str("GRAIN_SNAPSHOT_BACKEND", "file").lower(),
        snapshot_path=_env_str("GRAIN_SNAPSHOT_PATH", ".grain/snapshots.json"),
        snapshot_key=_env_str("GRAIN_SNAPSHOT_KEY", DEFAULT_SNAPSHOT_KEY),
        snapshot_collection=_env_str("GRAIN_SNAPSHOT_COLLECTION", "grainSnapshots"),
        firebase_credentials=_env_str("FIREBASE_ADMIN_CREDENTIALS", "firebase-admin.json"),
        cors_origins=_cors_origins(),
        log_level=_env_str("LOG_LEVEL", "INFO").upper(),
    )
