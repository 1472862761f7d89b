"""
Configuration settings for the CSAT exam catalog.
"""

import logging
import os
from typing import List, Optional

from dotenv import load_dotenv

from ..errors import ConfigurationMissing

load_dotenv()


def _env_bool(name: str, default: str = "False") -> bool:
    return os.environ.get(name, default).lower() == "true"


class Settings:
    """Application settings loaded from environment."""

    def __init__(self):
        # Database
        self.MONGODB_URL: str = os.environ.get("MONGODB_URI", "mongodb://localhost:27017")
        self.DATABASE_NAME: str = os.environ.get("DB_NAME", "csat_catalog")

        # Object store (S3 or any S3-compatible endpoint)
        self.S3_BUCKET_NAME: str = os.environ.get("S3_BUCKET_NAME", "")
        self.AWS_ACCESS_KEY_ID: str = os.environ.get("AWS_ACCESS_KEY_ID", "")
        self.AWS_SECRET_ACCESS_KEY: str = os.environ.get("AWS_SECRET_ACCESS_KEY", "")
        self.AWS_REGION: str = os.environ.get("AWS_REGION", "us-east-1")
        self.S3_ENDPOINT_URL: Optional[str] = os.environ.get("S3_ENDPOINT_URL") or None

        # Server
        self.PORT: int = int(os.environ.get("PORT", 3001))
        self.HOST: str = os.environ.get("HOST", "0.0.0.0")
        self.DEBUG: bool = _env_bool("DEBUG")
        self.CORS_ORIGINS: List[str] = os.environ.get("CORS_ORIGINS", "*").split(",")

        # Query decoding: reject malformed numeric filters instead of dropping them
        self.STRICT_FILTER_PARAMS: bool = _env_bool("STRICT_FILTER_PARAMS")

        # "uuid" -> documents/{id}.pdf, "metadata" -> exams/{grade}/.../{doc_type}.pdf
        self.STORAGE_LAYOUT: str = os.environ.get("STORAGE_LAYOUT", "uuid")

        # Maintenance scripts
        self.BATCH_DELAY_SECONDS: float = float(os.environ.get("BATCH_DELAY_SECONDS", 1.0))
        self.THUMBNAIL_DPI: int = int(os.environ.get("THUMBNAIL_DPI", 150))
        self.THUMBNAIL_MAX_WIDTH: int = int(os.environ.get("THUMBNAIL_MAX_WIDTH", 800))
        self.THUMBNAIL_MAX_HEIGHT: int = int(os.environ.get("THUMBNAIL_MAX_HEIGHT", 1200))

        # File upload
        self.MAX_FILE_SIZE_MB: int = int(os.environ.get("MAX_FILE_SIZE_MB", 100))

        # Logging
        self.LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")

    def validate(self, require_object_store: bool = False):
        """Validate critical settings.

        Raises ConfigurationMissing naming every absent variable.
        """
        missing = []
        if not self.MONGODB_URL:
            missing.append("MONGODB_URI")
        if not self.DATABASE_NAME:
            missing.append("DB_NAME")
        if self.STORAGE_LAYOUT not in ("uuid", "metadata"):
            raise ConfigurationMissing(
                f"STORAGE_LAYOUT must be 'uuid' or 'metadata', got '{self.STORAGE_LAYOUT}'"
            )

        if require_object_store:
            for name in ("S3_BUCKET_NAME", "AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY"):
                if not getattr(self, name):
                    missing.append(name)

        if missing:
            raise ConfigurationMissing(
                f"Missing required environment variables: {', '.join(missing)}"
            )
        return True


def configure_logging(settings: "Settings"):
    """Configure root logging for the API server and the maintenance scripts."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# Global settings instance
settings = Settings()
