"""
Configuration Module

Reads application settings from environment variables once at startup.
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_FIXTURE_PATH = Path(__file__).parent.parent / "config" / "demo_seed.yaml"


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _database_url_from_env() -> str:
    url = os.getenv("DATABASE_URL", "").strip()
    if url:
        # Hosting providers still hand out the postgres:// alias SQLAlchemy dropped
        if url.startswith(("postgres://", "postgres+")):
            url = "postgresql" + url[len("postgres"):]
        return url

    return (
        f"postgresql://{os.getenv('DB_USER', 'numberwise')}:"
        f"{os.getenv('DB_PASSWORD', 'password')}@"
        f"{os.getenv('DB_HOST', 'localhost')}:"
        f"{os.getenv('DB_PORT', '5432')}/"
        f"{os.getenv('DB_NAME', 'numberwise')}"
    )


@dataclass
class Settings:
    """Application settings."""

    database_url: str
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])
    log_level: str = "INFO"
    seed_demo_data: bool = True
    seed_fixture_path: Path = DEFAULT_FIXTURE_PATH
    pool_size: int = 5
    max_overflow: int = 10

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def require_ssl(self) -> bool:
        """TLS is enforced on PostgreSQL connections in production."""
        return self.is_production and self.database_url.startswith("postgresql")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment.

        Returns:
            Settings
        """
        environment = os.getenv("ENVIRONMENT", "development").strip() or "development"
        cors_origins = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
            if origin.strip()
        ]

        return cls(
            database_url=_database_url_from_env(),
            environment=environment,
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3001")),
            cors_origins=cors_origins,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            # Demo data never goes into production unless asked for explicitly
            seed_demo_data=_env_flag("SEED_DEMO_DATA", environment != "production"),
            seed_fixture_path=Path(os.getenv("SEED_FIXTURE_PATH") or DEFAULT_FIXTURE_PATH),
            pool_size=int(os.getenv("DB_POOL_SIZE", "5")),
            max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "10")),
        )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging to stdout."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
