from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, model_validator
from urllib.parse import quote_plus
from enum import Enum


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    # Environment Configuration
    ENVIRONMENT: Environment = Environment.DEVELOPMENT

    # Project Information
    PROJECT_NAME: str = "HealthAccess API"
    VERSION: str = "0.1.0"
    API_V1_STR: str = "/api/v1"

    # Server settings
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000

    # Database
    POSTGRES_SERVER: Optional[str] = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: Optional[str] = "postgres"
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_DB: Optional[str] = "healthaccess"
    SQLALCHEMY_DATABASE_URI: Optional[str] = None

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Redis fan-out for push events (disabled when unset)
    REDIS_URL: Optional[str] = None
    EVENTS_CHANNEL: str = "healthaccess:events"

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Consultation workflow
    ENFORCE_CONSULTATION_WINDOW: bool = True
    ALLOW_UNFILTERED_CONSULTATION_FALLBACK: bool = False

    # Consultation reminders
    REMINDERS_ENABLED: bool = True
    REMINDER_SCAN_INTERVAL_SECONDS: int = 30

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    @field_validator("REDIS_URL", "LOG_FILE", mode="before")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str) and v.strip() == "":
            return None
        return v

    @model_validator(mode="after")
    def _derive_database_uri(self) -> "Settings":
        # Derive SQLALCHEMY_DATABASE_URI if not provided
        if not self.SQLALCHEMY_DATABASE_URI:
            user = self.POSTGRES_USER
            server = self.POSTGRES_SERVER
            db = self.POSTGRES_DB
            if user and server and db:
                safe_user = quote_plus(user)
                if self.POSTGRES_PASSWORD:
                    safe_password = quote_plus(self.POSTGRES_PASSWORD)
                    self.SQLALCHEMY_DATABASE_URI = (
                        f"postgresql://{safe_user}:{safe_password}@{server}:{self.POSTGRES_PORT}/{db}"
                    )
                else:
                    self.SQLALCHEMY_DATABASE_URI = (
                        f"postgresql://{safe_user}@{server}:{self.POSTGRES_PORT}/{db}"
                    )
        return self

    @model_validator(mode="after")
    def validate_environment_config(self) -> "Settings":
        """Validate environment-specific configuration requirements"""
        if self.is_production:
            if self.SECRET_KEY in ("", "change-me"):
                raise ValueError("SECRET_KEY must be set to a real secret in production")
            if not self.ENFORCE_CONSULTATION_WINDOW:
                raise ValueError("ENFORCE_CONSULTATION_WINDOW cannot be disabled in production")
        return self

    # Environment-specific properties
    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == Environment.DEVELOPMENT

    @property
    def is_staging(self) -> bool:
        return self.ENVIRONMENT == Environment.STAGING

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == Environment.PRODUCTION

    @property
    def uses_sqlite(self) -> bool:
        return bool(self.SQLALCHEMY_DATABASE_URI) and self.SQLALCHEMY_DATABASE_URI.startswith("sqlite")

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env", extra="ignore")


settings = Settings()
