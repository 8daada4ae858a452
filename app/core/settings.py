"""
Core settings and environment variables for the Street Issue Reporter.
Uses pydantic-settings for type-safe environment variable loading.
"""

from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Create a .env file in the root directory to configure these.
    """

    # Application
    APP_NAME: str = "Street Issue Reporter"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Server (used when started with `python -m app.main`)
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    # CORS - comma separated list, "*" allows any origin
    CORS_ORIGINS: str = "*"

    # Firebase/Firestore
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None  # Path to service account JSON

    # Mock DB mode for local development without Firebase credentials
    USE_MOCK_DB: bool = False
    MOCK_DB_PATH: str = "./mock_db.json"

    # Reports
    REPORTS_COLLECTION: str = "reports"
    UPLOAD_DIR: str = "./uploads"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Global settings instance
settings = Settings()
