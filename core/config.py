"""
Application configuration using Pydantic Settings
"""

from pydantic import model_validator
from pydantic_settings import BaseSettings
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# Firestore rejects write batches holding more writes than this
FIRESTORE_MAX_BATCH_WRITES = 500


class Settings(BaseSettings):
    """Migration settings with environment variable support"""

    # Source (MySQL)
    MYSQL_DRIVER: str = "mysql+aiomysql"
    MYSQL_HOST: str = "localhost"
    MYSQL_PORT: int = 3306
    MYSQL_USER: str = "root"
    MYSQL_PASSWORD: str = ""
    MYSQL_DATABASE: str = "fcc_amateur"

    # Target (Firestore)
    FIREBASE_CREDENTIALS_PATH: str = "serviceAccount.json"
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIRESTORE_COLLECTION: str = "fcc_amateur_aamir"

    # IANA zone for naive DATETIME values; unset means the local zone
    SOURCE_TIMEZONE: Optional[str] = None

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Migration Configuration
    TABLES: List[str] = ["en"]
    CHUNK_SIZE: int = 10000
    BATCH_SIZE: int = 250
    MAX_RETRIES: int = 3
    BACKOFF_BASE_SECONDS: float = 1.0
    INTER_BATCH_DELAY_SECONDS: float = 0.5
    PROGRESS_EVERY: int = 10

    @model_validator(mode="after")
    def check_sizes(self):
        """Batches must fit inside a chunk and a Firestore write batch"""
        if self.CHUNK_SIZE <= 0 or self.BATCH_SIZE <= 0:
            raise ValueError("CHUNK_SIZE and BATCH_SIZE must be positive")
        if self.BATCH_SIZE > FIRESTORE_MAX_BATCH_WRITES:
            raise ValueError(f"BATCH_SIZE cannot exceed {FIRESTORE_MAX_BATCH_WRITES} writes")
        if self.BATCH_SIZE > self.CHUNK_SIZE:
            raise ValueError("BATCH_SIZE cannot exceed CHUNK_SIZE")
        if self.MAX_RETRIES < 1:
            raise ValueError("MAX_RETRIES must be at least 1")
        if self.SOURCE_TIMEZONE:
            try:
                ZoneInfo(self.SOURCE_TIMEZONE)
            except ZoneInfoNotFoundError:
                raise ValueError(f"Unknown SOURCE_TIMEZONE: {self.SOURCE_TIMEZONE}")
        return self

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
