import os
from pydantic_settings import BaseSettings
from typing import Dict, List

DEFAULT_CATEGORY_OWNERS = {
    "Banner Printing": "Nazir",
    "Glass Printing": "Nazir",
    "Flag Printing": "Nazir",
    "Sticker Printing": "Nazir",
}

class Settings(BaseSettings):
    app_name: str = "Print Shop Ledger API"
    database_url: str = os.getenv("DATABASE_URL", "")
    database_ssl_mode: str = os.getenv("DATABASE_SSL_MODE", "prefer")

    # Category -> responsible owner. Orders with no mapped category go to default_owner.
    category_owners: Dict[str, str] = DEFAULT_CATEGORY_OWNERS
    default_owner: str = "Shabir"

    currency: str = "AFN"
    ledger_default_limit: int = 100
    api_request_logging: bool = True

    cors_origins: List[str] = ["*"]

    class Config:
        env_file = ".env"

settings = Settings()
