from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv
from typing import Optional

load_dotenv()


class Settings(BaseSettings):
    # Application settings
    app_name: str = "Stream CMS"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # Database settings
    database_url: str

    # Security settings
    secret_key: str
    access_token_expire_minutes: int = 30
    session_cookie_name: str = "access_token"
    cookie_secure: bool = False

    # Site settings
    site_name: Optional[str] = None
    site_domain: str = "localhost"

    # Poster uploads
    poster_upload_dir: str = "public/images/posters"
    poster_public_path: str = "/images/posters"
    poster_max_file_size: int = 5 * 1024 * 1024

    # Logging settings
    log_level: str = "INFO"
    json_logs: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()
