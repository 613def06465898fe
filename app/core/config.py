"""
Application configuration settings
"""

from pydantic_settings import BaseSettings
from typing import Optional, List


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "Contract Insight"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # CORS
    CORS_ORIGINS: List[str] = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: List[str] = ["GET", "POST", "DELETE", "OPTIONS"]
    CORS_ALLOW_HEADERS: List[str] = ["Content-Type"]

    # Uploads
    MAX_UPLOAD_SIZE_MB: int = 10

    # OpenAI Configuration (reasoning service)
    OPENAI_API_KEY: Optional[str] = None
    ANALYSIS_MODEL: str = "gpt-4o-mini"
    ANALYSIS_TIMEOUT_SECONDS: float = 60.0
    ANALYSIS_TEMPERATURE: float = 0.0
    ANALYSIS_JSON_MODE: bool = True
    ANALYSIS_MAX_CONCURRENCY: Optional[int] = None  # unset = no admission limit
    ANALYSIS_MAX_INPUT_CHARS: Optional[int] = None  # unset = send full contract text

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def max_upload_size_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024


settings = Settings()
