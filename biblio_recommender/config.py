"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local secrets and env overrides (gitignored)
  4. Environment variables        — ``BIBLIO_RECOMMENDER_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The CLI receives an ``AppConfig`` instance and passes individual values
(window, limits) to the recommendation engines as explicit arguments.
The engines themselves never read configuration.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class DataConfig(BaseModel):
    """Filesystem paths for the loan ledger, book catalog and report output."""

    model_config = ConfigDict(frozen=True)

    ledger_file: str = "data/loans.csv"
    catalog_file: str = "data/books.csv"
    output_dir: str = "data/outputs/recommendations"


class RecommendationConfig(BaseModel):
    """Engine parameters supplied by the CLI.

    ``trending_window_days`` is the standard trending window, also used as the
    fallback window for content-based and collaborative recommendations.
    """

    model_config = ConfigDict(frozen=True)

    trending_window_days: int = 7
    trending_limit: int = 10
    personal_limit: int = 5

    @field_validator("trending_window_days")
    @classmethod
    def validate_window(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"trending_window_days must be > 0, got {v}.")
        return v

    @field_validator("trending_limit", "personal_limit")
    @classmethod
    def validate_limit(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"Recommendation limits must be >= 0, got {v}.")
        return v


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    data: DataConfig = DataConfig()
    recommendations: RecommendationConfig = RecommendationConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply BIBLIO_RECOMMENDER_* environment variable overrides
    raw = _apply_env_overrides(raw)

    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply BIBLIO_RECOMMENDER_* env vars to the raw config dict.

    Supported overrides:
      BIBLIO_RECOMMENDER_LEDGER_FILE   → raw["data"]["ledger_file"]
      BIBLIO_RECOMMENDER_CATALOG_FILE  → raw["data"]["catalog_file"]
      BIBLIO_RECOMMENDER_LOG_LEVEL     → raw["logging"]["level"]
      BIBLIO_RECOMMENDER_DEBUG         → raw["debug"]
    """
    if ledger_file := os.environ.get("BIBLIO_RECOMMENDER_LEDGER_FILE"):
        raw.setdefault("data", {})["ledger_file"] = ledger_file

    if catalog_file := os.environ.get("BIBLIO_RECOMMENDER_CATALOG_FILE"):
        raw.setdefault("data", {})["catalog_file"] = catalog_file

    if log_level := os.environ.get("BIBLIO_RECOMMENDER_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("BIBLIO_RECOMMENDER_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        data=DataConfig(**raw.get("data", {})),
        recommendations=RecommendationConfig(**raw.get("recommendations", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
