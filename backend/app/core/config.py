from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    ENV: str = Field(default="dev")  # dev|prod|test

    # DB
    DATABASE_URL: str = Field(default="postgresql+psycopg://app:app@db:5432/smartproject")

    # CORS
    CORS_ORIGINS: str = Field(default="http://localhost:3000,http://localhost:5173")

    # Files
    UPLOAD_DIR: str = Field(default="/app/data/uploads")
    EXPORT_DIR: str = Field(default="/app/data/exports")
    MAX_IMPORT_BYTES: int = Field(default=5 * 1024 * 1024)

    # Business defaults
    MAX_WBS_LEVEL: int = Field(default=3)
    DEFAULT_CURRENCY: str = Field(default="USD")

    # Seed (dev)
    SEED_DEMO: bool = Field(default=True)


settings = Settings()
