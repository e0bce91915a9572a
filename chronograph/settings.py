"""
chronograph.settings
====================

Configuration settings for the Chronograph application.

This module provides centralized configuration options that can be used across
the package, the CLI and the HTTP layer. It includes default values that can
be overridden via environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings

# ---------------------------------------------------------------------------
# Base directories
# ---------------------------------------------------------------------------
# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent.parent

# Database settings
# ---------------------------------------------------------------------------
DB_FILE = os.environ.get("CHRONOGRAPH_DB_FILE", BASE_DIR / "chronograph.db")
DB_URL = f"sqlite:///{DB_FILE}"
DB_ECHO = os.environ.get("CHRONOGRAPH_DB_ECHO", "False").lower() == "true"

# API settings
# ---------------------------------------------------------------------------
API_HOST = os.environ.get("CHRONOGRAPH_API_HOST", "127.0.0.1")
API_PORT = int(os.environ.get("CHRONOGRAPH_API_PORT", "8000"))
API_DEBUG = os.environ.get("CHRONOGRAPH_API_DEBUG", "False").lower() == "true"

# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = os.environ.get("CHRONOGRAPH_LOG_LEVEL", "INFO").upper()


# ---------------------------------------------------------------------------
# Pydantic settings model for the graph schema
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Pydantic model for graph schema settings, loaded from environment variables."""

    state_label: str = Field("State", description="Label carried by every State node")
    entity_label: str = Field("Entity", description="Label carried by every Entity node")
    reference_label: str = Field(
        "R", description="Tag label of reference nodes whose edges are replayed on patch"
    )
    api_title: str = Field("Chronograph API", description="Title shown in the OpenAPI docs")

    class Config:
        """Configuration for the settings model."""
        env_prefix = "CHRONOGRAPH_"
        env_file = ".env"  # load from .env file if present
        case_sensitive = False
        extra = "ignore"

# Initialize settings
settings = Settings()
