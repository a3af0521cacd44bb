"""Bridge configuration using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Bridge settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Telegram Bridge"
    log_level: str = "info"

    # Telegram
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""

    # Thread used before the user picks one from the menu
    default_thread_id: str = ""

    # Polling
    polling_interval_ms: int = 2000
    long_poll_timeout: int = 30
    activation_delay_ms: int = 1000

    # MongoDB (host chat storage)
    mongodb_uri: str = "mongodb://mongodb:27017"
    mongodb_database: str = "ai_assistant"
    reply_watch_interval_ms: int = 3000

    @property
    def is_configured(self) -> bool:
        return bool(self.telegram_bot_token and self.telegram_chat_id)

    @property
    def polling_interval(self) -> float:
        """Delay between poll cycles in seconds."""
        return max(self.polling_interval_ms, 0) / 1000


settings = Settings()


def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return settings
