from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./quickadd.sqlite"
    app_env: str = "dev"
    timezone: str = "UTC"
    log_level: str = "INFO"
    default_project: str = "Inbox"

    model_config = SettingsConfigDict(env_file=".env", env_prefix="", case_sensitive=False)


settings = Settings()
