from urllib.parse import urlsplit

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOCAL_HOSTS = {"localhost", "127.0.0.1"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    APP_ENV: str = "development"
    API_URL: str = "http://localhost:3001"

    # Deal room auto-save
    AUTO_SAVE_INTERVAL_MS: int = 2000
    ENABLE_AUTO_SAVE: bool = True
    # None disables the per-request timeout; a hung request keeps the status at "saving"
    DRAFT_REQUEST_TIMEOUT: float | None = None

    # Draft store records
    DRAFT_TTL_HOURS: int = 24
    MAX_VERSION_HISTORY: int = 10

    @model_validator(mode="after")
    def _validate_production_api_url(self) -> "Settings":
        if self.APP_ENV == "production":
            parts = urlsplit(self.API_URL)
            if parts.scheme != "https" and parts.hostname not in _LOCAL_HOSTS:
                raise ValueError(
                    f"API_URL must use HTTPS in production. Got: {self.API_URL}"
                )
        return self

    @property
    def auto_save_interval(self) -> float:
        """Debounce interval in seconds."""
        return self.AUTO_SAVE_INTERVAL_MS / 1000


settings = Settings()
