from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    telegram_bot_token: str = ""
    user_telegram_chat_id: str = ""

    user_timezone: str = "UTC"
    # Hour used for day-granular due dates given without a clock time
    default_due_hour: int = 9

    # Sentry error tracking
    sentry_dsn: str = ""
    sentry_environment: str = "production"

    log_level: str = "INFO"
    data_dir: str = "~/.task-tracker"

    @property
    def has_telegram(self) -> bool:
        return bool(self.telegram_bot_token)

    @property
    def has_sentry(self) -> bool:
        return bool(self.sentry_dsn)

    @property
    def tasks_path(self) -> Path:
        return Path(self.data_dir).expanduser() / "tasks.json"


settings = Settings()
