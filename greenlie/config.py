"""
GreenLie Configuration

Central settings loaded from environment variables.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

_PACKAGE_DIR = Path(__file__).resolve().parent
_DEFAULT_FACTS_PATH = str(_PACKAGE_DIR / "data" / "green_lie_facts.json")


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    # --- Versioning ---
    ENGINE_VERSION: str = "1.0.0"
    API_VERSION: str = "1"

    # --- Reference data ---
    FACTS_PATH: str = os.getenv("GREENLIE_FACTS_PATH", _DEFAULT_FACTS_PATH)

    # --- Local store ---
    DB_PATH: str = os.getenv("GREENLIE_DB_PATH", "greenlie_store.db")

    # --- CORS ---
    CORS_ORIGINS: str = os.getenv("GREENLIE_CORS_ORIGINS", "*")


settings = Settings()
