"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without leaking into the CLI.
- Lets adapters (SQL/HTTP/snapshot) read configuration consistently.
"""

from __future__ import annotations

import os
import sys
from enum import Enum
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SAMPLE_SIZE = 4


class SourceKind(str, Enum):
    """Backends able to serve the three catalog relations."""

    SQL = "sql"
    HTTP = "http"
    SNAPSHOT = "snapshot"


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "collections-view"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "collections-view"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "collections-view"
    return Path.home() / ".config" / "collections-view"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], *, env_path: Path | None = None) -> Path:
    """Write/update variables in the user's global .env."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        try:
            existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))
        except OSError:
            existing = {}

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# collections-view user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application settings.

    Why pydantic-settings:
    - Typed, validated values at the edge (env vars) without polluting the core.
    - One configuration contract shared by the CLI and every adapter.
    """

    model_config = SettingsConfigDict(
        env_prefix="COLLECTIONS_VIEW_",
        extra="ignore",
        case_sensitive=False,
        # Project .env first (dev), then the user-level config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    source: SourceKind = Field(
        default=SourceKind.SQL,
        description="Backend used to read collections, products and images.",
    )
    database_url: str = Field(
        default="sqlite+aiosqlite:///./catalog.db",
        min_length=1,
        description="SQLAlchemy async URL for the relational catalog.",
    )
    api_base_url: str = Field(
        default="http://localhost:8000/api",
        min_length=8,
        description="Base URL of the REST catalog service (source=http).",
    )
    snapshot_path: Path | None = Field(
        default=None,
        description="Path to a JSON catalog snapshot (source=snapshot).",
    )

    sample_size: int = Field(
        default=DEFAULT_SAMPLE_SIZE,
        ge=1,
        le=50,
        description="Maximum number of products sampled per collection.",
    )

    http_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout per HTTP request (seconds).",
    )
    user_agent: str = Field(
        default="collections-view/0.1",
        min_length=1,
        description="User-Agent sent to the REST catalog service.",
    )
