# storefront/core/config.py
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Configuración general
    app_name: str = "Storefront API"
    log_level: str = "INFO"
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
    ]

    # MongoDB
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db_name: str = "storefront"

    # Stripe
    stripe_secret_key: str = ""
    stripe_public_key: str = ""
    stripe_webhook_secret: str = ""
    currency: str = "mad"

    # Tienda
    default_locale: str = "ar"
    products_per_page: int = 12

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


# Instancia global para usar en toda la app
settings = Settings()
