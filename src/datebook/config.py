# src/datebook/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing is required at import time; every value has a local default.
- Modules take an injected settings object; get_settings() is only for the entrypoint.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "DATEBOOK"

VIEW_NAMES = ("Day", "Week", "Month", "Year")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except ImportError:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    wanted = raw.strip().lower()
    for c in choices:
        if c.lower() == wanted:
            return c
    return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    storage_backend: str
    tasks_db_path: Path
    tasks_json_path: Path
    storage_key: str

    # ---- View behaviour ----
    default_view: str
    strict_indices: bool
    chronological: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "datebook").strip() or "datebook"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/datebook"))
        # Unknown backend names are not silently remapped; open_storage() rejects them.
        storage_backend = _env(_k("STORAGE_BACKEND"), "sqlite").strip().lower() or "sqlite"
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "tasks.sqlite3")
        tasks_json_path = _env_path(_k("TASKS_JSON_PATH"), data_dir / "tasks.json")
        storage_key = _env(_k("STORAGE_KEY"), "tasks").strip() or "tasks"

        default_view = _env_choice(_k("DEFAULT_VIEW"), VIEW_NAMES, "Day")
        strict_indices = _env_bool(_k("STRICT_INDICES"), False)
        chronological = _env_bool(_k("CHRONOLOGICAL"), False)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            storage_backend=storage_backend,
            tasks_db_path=tasks_db_path,
            tasks_json_path=tasks_json_path,
            storage_key=storage_key,
            default_view=default_view,
            strict_indices=strict_indices,
            chronological=chronological,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
