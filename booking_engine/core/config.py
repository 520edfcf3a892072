from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    BUSINESS_TIMEZONE: str = "UTC"

    SLOT_STEP_MINUTES: int = 15
    MIN_LEAD_MINUTES: int = 0
    DEFAULT_BUSINESS_HOURS: str | None = None  # e.g. "09:00-18:00", used when a provider has no window that day

    ALTERNATIVE_HORIZON_DAYS: int = 14
    ALTERNATIVE_SAME_DAY_LIMIT: int = 4
    ALTERNATIVE_MAX_RESULTS: int = 5

    RECURRENCE_MAX_OCCURRENCES: int = 52

    STORE_PROVIDER: str = "memory"  # "memory" | "json"
    DATA_DIR: str = "./data"

    CATALOG_BASE_URL: str | None = None
    CATALOG_API_KEY: str | None = None
    CATALOG_TIMEOUT_SECONDS: float = 10.0


settings = Settings()
