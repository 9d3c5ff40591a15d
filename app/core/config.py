from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    STORE_PROVIDER: str = "json"  # "json" or "memory"
    STATE_FILE: str = "./data/bmh_state.json"

    AUTO_DISPATCH_ENABLED: bool = True
    DISPATCH_INTERVAL_SECONDS: float = 5.0
    DISPATCH_MAX_RETRIES: int = 3


settings = Settings()
