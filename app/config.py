from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str | None = None  # e.g. sqlite+aiosqlite:///./reservations.db
    database_echo: bool = False
    use_in_memory: bool = True

    paymongo_secret_key: str | None = None
    paymongo_webhook_secret: str | None = None
    paymongo_api_base: str = "https://api.paymongo.com/v1"
    paymongo_timeout_seconds: float = 10.0
    paymongo_payment_method_types: list[str] = [
        "card",
        "gcash",
        "paymaya",
        "grab_pay",
        "qrph",
    ]

    app_base_url: str = "http://localhost:3000"
    default_currency: str = "PHP"
    checkout_session_ttl_hours: int = 24
    confirmation_retry_attempts: int = 3


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
