# signup/core/config.py
from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, Field

# Load variables from .env (if present)
from dotenv import load_dotenv
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


class Settings(BaseModel):
    # --- App base ---
    APP_NAME: str = os.getenv("APP_NAME", "Session Sign-up API")
    APP_VERSION: str = os.getenv("APP_VERSION", "dev")

    # --- Database ---
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./sessions.db")
    AUTO_CREATE_TABLES: bool = _env_bool("AUTO_CREATE_TABLES", "true")

    # --- Links returned on creation (frontend base, e.g. https://example.org) ---
    PUBLIC_BASE_URL: str = os.getenv("PUBLIC_BASE_URL", "")

    # --- Generated secrets ---
    # random bytes per management code / invite token / attendance code
    CODE_BYTES: int = Field(default=int(os.getenv("CODE_BYTES", "8")), ge=8, le=64)
    CODE_GENERATION_TRIES: int = Field(default=int(os.getenv("CODE_GENERATION_TRIES", "6")), ge=1)

    # --- Visibility / roster behavior ---
    # Require management code or invite token to read details of a private session
    DETAILS_REQUIRE_CODE: bool = _env_bool("DETAILS_REQUIRE_CODE", "false")
    # Legacy behavior: an empty roster is reported as not found
    EMPTY_ROSTER_NOT_FOUND: bool = _env_bool("EMPTY_ROSTER_NOT_FOUND", "false")

    # --- CORS ---
    CORS_EXTRA: str = os.getenv("CORS_EXTRA", "")

    # --- Logging ---
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def cors_origins(self) -> list[str]:
        origins = [
            "http://localhost",
            "http://localhost:3000",
            "http://localhost:5173",
            "http://127.0.0.1:3000",
            "http://127.0.0.1",
        ]
        for item in [x.strip() for x in self.CORS_EXTRA.split(",") if x.strip()]:
            if item not in origins:
                origins.append(item)
        return origins


@lru_cache
def get_settings() -> Settings:
    """Return a single cached Settings instance."""
    return Settings()
