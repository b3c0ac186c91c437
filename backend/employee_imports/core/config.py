from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    ENV: str = Field(default="dev")  # dev|prod

    # DB
    DATABASE_URL: str = Field(default="postgresql+psycopg://app:app@db:5432/app")
    CREATE_TABLES: bool = Field(default=True)

    # CORS
    CORS_ORIGINS: str = Field(default="http://localhost:3000,http://localhost")

    # Files
    EXPORT_SHEET_TITLE: str = Field(default="Employés")
    UPLOAD_MAX_BYTES: int = Field(default=10 * 1024 * 1024)


settings = Settings()
