from pathlib import Path

from pydantic_settings import BaseSettings

_DEFAULT_SEED_PATH = Path(__file__).resolve().parent.parent / "data" / "products.json"


class Settings(BaseSettings):
    APP_NAME: str = "Catalog Admin API"

    # DB (volatile, reset on restart)
    DATABASE_URL: str = "sqlite://"

    # Seed data
    SEED_ON_STARTUP: bool = True
    SEED_DATA_PATH: str = str(_DEFAULT_SEED_PATH)

    # Pagination
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # Logging thresholds
    LOG_LEVEL: str = "INFO"
    SLOW_CALCULATION_MS: float = 30.0
    SLOW_REQUEST_MS: float = 500.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
