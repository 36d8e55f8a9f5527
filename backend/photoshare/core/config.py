"""Application configuration using Pydantic Settings."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Server
    debug: bool = False

    # CORS - the single-page client runs on its own dev server
    cors_origins: list[str] = ["http://localhost:3000"]

    # Database
    database_url: str = "sqlite+aiosqlite:///./photoshare.db"

    # Storage
    images_dir: Path = Path("./images")
    max_image_width: int = 1920
    thumbnail_max_width: int = 400

    # Sessions
    secret_key: str = "photoshare-secret-change-me"
    session_cookie: str = "photoshare_session"
    session_max_age_seconds: int = 60 * 60 * 24 * 14

    # Activity feed
    activity_default_limit: int = 5
    activity_max_limit: int = 50

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    def __init__(self, **kwargs: object) -> None:
        super().__init__(**kwargs)
        # Ensure images directory exists
        self.images_dir.mkdir(parents=True, exist_ok=True)


settings = Settings()
