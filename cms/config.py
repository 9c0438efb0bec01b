"""Centralised settings for the CMS backend.

Every setting has a default and a ``CMS_*`` environment variable that
overrides it.  A ``.env`` file next to the packages is read on import but never
wins over variables already set in the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("CMS_WORKSPACE", Path.home() / ".cms_data")
        )
    )
    db_path_override: str | None = field(
        default_factory=lambda: os.environ.get("CMS_DB_PATH") or None
    )

    @property
    def db_path(self) -> Path:
        """``CMS_DB_PATH`` if set, else ``cms.db`` inside the workspace."""
        if self.db_path_override:
            return Path(self.db_path_override)
        return self.workspace_dir / "cms.db"

    @property
    def schema_path(self) -> Path:
        """DDL shipped as package data next to the DB modules."""
        return Path(__file__).resolve().parent / "db" / "schema.sql"

    # ------------------------------------------------------------------
    # HTTP server
    # ------------------------------------------------------------------
    host: str = field(default_factory=lambda: os.environ.get("CMS_HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.environ.get("CMS_PORT", "3000")))
    cors_origins: list[str] = field(
        default_factory=lambda: [
            o.strip()
            for o in os.environ.get("CMS_CORS_ORIGINS", "*").split(",")
            if o.strip()
        ]
    )
    debug: bool = field(default_factory=lambda: _env_flag("CMS_DEBUG"))

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("CMS_LOG_LEVEL", "INFO").upper()
    )
    log_format: str = field(
        default_factory=lambda: os.environ.get("CMS_LOG_FORMAT", "console").lower()
    )


# Module-level singleton — import this everywhere:
#   from cms.config import settings
settings = Settings()
