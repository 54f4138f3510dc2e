"""
Configuration settings for the application
"""

import os
from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""

    # Table store
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./wedding_planner.db")
    USE_FIREBASE: bool = os.getenv("USE_FIREBASE", "false").lower() in ("1", "true", "yes")
    FIREBASE_CREDENTIALS_JSON: str | None = os.getenv("FIREBASE_CREDENTIALS_JSON")
    FIREBASE_CREDENTIALS_FILE: str | None = os.getenv("FIREBASE_CREDENTIALS_FILE")
    FIREBASE_CREDENTIALS_B64: str | None = os.getenv("FIREBASE_CREDENTIALS_B64")
    FIREBASE_STORAGE_BUCKET: str | None = os.getenv("FIREBASE_STORAGE_BUCKET")

    # Object storage (prefixes inside the bucket, or folders under UPLOAD_DIR)
    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "uploads")
    PHOTO_BUCKET: str = "wedding-photos"
    CONTRACT_BUCKET: str = "vendor-files"
    RECEIPT_BUCKET: str = "receipts"
    MOODBOARD_BUCKET: str = "mood-board-images"

    # Outbound email function
    FUNCTIONS_BASE_URL: str | None = os.getenv("FUNCTIONS_BASE_URL")
    FUNCTIONS_API_KEY: str | None = os.getenv("FUNCTIONS_API_KEY")
    EMAIL_FUNCTION_NAME: str = os.getenv("EMAIL_FUNCTION_NAME", "send-email")
    EMAIL_TIMEOUT_SECONDS: float = 10.0

    # Security
    ADMIN_TOKEN: str = os.getenv("ADMIN_TOKEN", "admin_token_123")

    # Application
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:8000")
    EVENT_NAME: str = os.getenv("EVENT_NAME", "Our Wedding")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8000",
    ]

    # File limits
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB

    # Rate limiting
    RATE_LIMIT_PER_MINUTE: int = 30

    class Config:
        env_file = ".env"

settings = Settings()
