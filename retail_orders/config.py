from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "Retail Orders"
    ENVIRONMENT: str = "local"

    # ==============================
    # Database
    # ==============================
    DATABASE_URL: str = "sqlite:///./retail_orders.db"
    DATABASE_ECHO: bool = False
    SQLITE_BUSY_TIMEOUT_SECONDS: int = 30

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ==============================
    # Integrity rules kept outside the schema
    # ==============================
    ENFORCE_FULFILMENT_ORDER_TYPE: bool = True
    SINGLE_STAFF_PER_ORDER: bool = True


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
