# parking_tracker/config.py
"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ── Database ──────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite:///./parking_tracker.db"

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_IP: str = "127.0.0.1"
    BACKEND_PORT: int = 8080

    # ── Security ──────────────────────────────────────────────────────────
    API_KEY: Optional[str] = None   # Set in .env to enable auth on API endpoints

    # ── Parking lot ───────────────────────────────────────────────────────
    DEFAULT_CAPACITY: int = 100      # Spots created when no snapshot exists
    MAX_CAPACITY: int = 10000        # Upper bound accepted from user input
    SNAPSHOT_SLOT: str = "parkingData"

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None    # Defaults to <repo>/logs

    @property
    def BACKEND_URL(self) -> str:
        return f"http://{self.BACKEND_IP}:{self.BACKEND_PORT}"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
