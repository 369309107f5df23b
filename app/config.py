"""All settings, loaded from the .env file."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

APP_VERSION = "1.0.0"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # App
    app_url: str = "http://localhost:8000"
    database_url: str = "sqlite:///./steel_marketplace.db"
    log_level: str = "INFO"

    # Passwords
    bcrypt_rounds: int = 10

    # Rate limiting (disabled when TESTING is set)
    rate_limit_enabled: bool = True
    rate_limit_default: str = "120/minute"
    rate_limit_login: str = "10/minute"
    rate_limit_register: str = "5/minute"

    # Quotes
    default_product_name: str = "Steel Items"
    default_seller_name: str = "Unknown Seller"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
