import re

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator

SLUG_MAX_LENGTH_LIMIT = 255
FALLBACK_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


class Settings(BaseSettings):
    database_url: str = Field(default="sqlite:///./marketplace.db", alias="DATABASE_URL")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    slug_fallback: str = Field(default="product", alias="SLUG_FALLBACK")
    slug_max_length: int = Field(default=SLUG_MAX_LENGTH_LIMIT, alias="SLUG_MAX_LENGTH")
    default_language_code: str = Field(default="en", alias="DEFAULT_LANGUAGE_CODE")
    cors_allowed_origins: str | None = Field(default=None, alias="CORS_ALLOWED_ORIGINS")
    trusted_hosts: str | None = Field(default=None, alias="TRUSTED_HOSTS")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    @property
    def DATABASE_URL(self) -> str:
        return self.database_url

    @property
    def CORS_ALLOWED_ORIGINS_LIST(self) -> list[str]:
        return _split_env_list(self.cors_allowed_origins)

    @property
    def TRUSTED_HOSTS_LIST(self) -> list[str]:
        return _split_env_list(self.trusted_hosts)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = (value or "").strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return level

    @field_validator("slug_fallback")
    @classmethod
    def validate_slug_fallback(cls, value: str) -> str:
        cleaned = (value or "").strip().lower()
        if not FALLBACK_PATTERN.match(cleaned):
            raise ValueError("SLUG_FALLBACK must be a lowercase slug token like 'product'")
        return cleaned

    @field_validator("slug_max_length")
    @classmethod
    def validate_slug_max_length(cls, value: int) -> int:
        if value < 16 or value > SLUG_MAX_LENGTH_LIMIT:
            raise ValueError(f"SLUG_MAX_LENGTH must be between 16 and {SLUG_MAX_LENGTH_LIMIT}")
        return value


def _split_env_list(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


settings = Settings()

engine = create_engine(settings.database_url, pool_pre_ping=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


class Base(DeclarativeBase):
    pass


# Dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
