"""
Centralized application settings
"""
import json
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings (loaded from environment and .env)"""

    # API Settings
    API_TITLE: str = "Doctor Planet API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Storefront and back-office API for Doctor Planet"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./storefront.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    # Sessions
    AUTH_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    SESSION_COOKIE_NAME: str = "session_token"
    SESSION_TTL_MINUTES: int = 60 * 24 * 30
    SESSION_COOKIE_SECURE: bool = False
    RESET_TOKEN_TTL_MINUTES: int = 60

    # Public URL of the storefront (used in reset links)
    APP_URL: str = "http://localhost:3000"

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:3000,https://yourdomain.com" or '["http://localhost:3000"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000"

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:3000"]

        # Try JSON parse first (for array format)
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    # Email (SMTP). Empty SMTP_HOST disables delivery.
    SMTP_HOST: str = ""
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_USE_TLS: bool = True
    FROM_EMAIL: str = "noreply@doctorplanet.com"
    FROM_NAME: str = "Doctor Planet"
    ADMIN_NOTIFICATION_EMAIL: str = ""

    # Supabase Storage (product and expense images)
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    SUPABASE_STORAGE_BUCKET: str = "images"
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # Store rules
    CURRENCY: str = "PKR"
    LOW_STOCK_THRESHOLD: int = 5

    # Rate limits (requests per minute)
    RATE_LIMIT_AUTHENTICATED: int = 1000
    RATE_LIMIT_UNAUTHENTICATED: int = 200
    RATE_LIMIT_AUTH_ENDPOINTS: int = 20

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
