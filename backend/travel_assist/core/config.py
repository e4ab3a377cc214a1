"""
Core configuration module for the Travel Assist catalog service.
Settings with environment variable management.
"""

from pydantic_settings import BaseSettings
from pathlib import Path
import logging

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Sensible defaults for local development.
    """

    # Application
    app_name: str = "Travel Assist Accessible Travel"
    app_version: str = "1.0.0"
    environment: str = "production"
    debug: bool = False

    # Database (bookings and favorites only; the catalog lives in memory)
    database_url: str = "sqlite:///./travel_assist.db"
    database_pool_size: int = 10
    database_max_overflow: int = 20
    database_pool_recycle: int = 1800  # Recycle connections after 30 min
    database_pool_pre_ping: bool = True

    # Catalog ingestion
    packages_csv_path: str = str(_DATA_DIR / "travel_packages.csv")
    hospitals_csv_path: str = str(_DATA_DIR / "travel_hospitals.csv")
    # Raise on the first malformed row instead of skipping it
    ingestion_strict: bool = False

    # API Configuration
    api_prefix: str = "/api/v1"
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_workers: int = 2

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    # CORS - restrict to known frontend origins (extend via .env)
    cors_origins: list = ["http://localhost:5173", "http://127.0.0.1:5173", "http://localhost:8080"]
    cors_allow_credentials: bool = False
    cors_allow_methods: list = ["GET", "POST", "DELETE", "OPTIONS"]
    cors_allow_headers: list = ["Content-Type", "Accept", "Accept-Language"]

    # Rate limiting (disable for local test runs)
    rate_limit_enabled: bool = True

    class Config:
        env_file = ".env"


# Global settings instance
settings = Settings()
