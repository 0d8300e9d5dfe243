"""Application configuration helpers."""

from __future__ import annotations

from functools import lru_cache
import logging
import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_NOTES_ROOT = PROJECT_ROOT / "notes"
DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:5173"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class AppConfig(BaseModel):
    """Runtime configuration loaded from environment variables."""

    model_config = ConfigDict(frozen=True)

    notes_root: Path = Field(..., description="Directory holding all notes and folders")
    note_extension: str = Field(default=".md", description="Extension of note files")
    ordering_file: str = Field(
        default=".metadata.json",
        description="Optional sidecar at the notes root listing display order",
    )
    graph_edge_probability: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Chance of a placeholder edge between any two notes",
    )
    cors_origins: List[str] = Field(
        default_factory=lambda: DEFAULT_CORS_ORIGINS.split(","),
        description="Origins allowed to call the API from a browser",
    )
    log_level: str = Field(default="INFO")

    @field_validator("notes_root", mode="before")
    @classmethod
    def _normalize_notes_root(cls, value: str | Path | None) -> Path:
        if value is None or value == "":
            raise ValueError("NOTES_ROOT is required")
        path = value if isinstance(value, Path) else Path(value)
        return path.expanduser().resolve()

    @field_validator("note_extension")
    @classmethod
    def _ensure_dot(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned or cleaned == ".":
            raise ValueError("NOTE_EXTENSION cannot be empty")
        return cleaned if cleaned.startswith(".") else f".{cleaned}"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: str | List[str]) -> List[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown LOG_LEVEL: {value}")
        return level


def _read_env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(key, default)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Load and cache application configuration."""
    config = AppConfig(
        notes_root=_read_env("NOTES_ROOT", str(DEFAULT_NOTES_ROOT)),
        note_extension=_read_env("NOTE_EXTENSION", ".md"),
        ordering_file=_read_env("ORDERING_FILE", ".metadata.json"),
        graph_edge_probability=float(_read_env("GRAPH_EDGE_PROBABILITY", "0.3")),
        cors_origins=_read_env("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
        log_level=_read_env("LOG_LEVEL", "INFO"),
    )
    # Downstream services assume the root exists.
    config.notes_root.mkdir(parents=True, exist_ok=True)
    return config


def reload_config() -> AppConfig:
    """Clear cached config (useful for tests) and reload."""
    get_config.cache_clear()
    return get_config()


def configure_logging(level: str = "INFO") -> None:
    """Install a basic root handler once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    root.setLevel(level)


__all__ = [
    "AppConfig",
    "get_config",
    "reload_config",
    "configure_logging",
    "PROJECT_ROOT",
    "DEFAULT_NOTES_ROOT",
]
