from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "confreview"

    database_url: str = "sqlite:///./confreview.db"
    sql_echo: bool = False

    log_level: str = "INFO"
    log_json: bool = False

    # MinIO / S3
    s3_endpoint: str = "http://localhost:9000"
    s3_access_key: str = "minioadmin"
    s3_secret_key: str = "minioadmin"
    s3_region: str = "us-east-1"
    s3_bucket: str = "papers"

    # Сколько раз повторять операцию после проигранной гонки (StaleData/Integrity)
    conflict_retries: int = 1


settings = Settings()
