from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    STORE_PROVIDER: str = "memory"
    DATA_DIR: str = "./data/stores"

    BUSINESS_TIMEZONE: str = "America/Sao_Paulo"
    DEFAULT_CURRENCY: str = "BRL"
    DEFAULT_SLOT_STEP_MINUTES: int = 30

    CANCELLED_APPOINTMENTS_BLOCK_SLOTS: bool = True
    DURATION_AWARE_SLOTS: bool = False

    MONTHLY_BOOKING_LIMIT: int | None = None


settings = Settings()
