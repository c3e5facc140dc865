import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

# Find .env next to the project, next to a frozen executable, or in the cwd
POSSIBLE_ENV_PATHS = [
    Path(__file__).resolve().parent.parent / ".env",
    Path(sys.executable).resolve().parent / ".env",
    Path.cwd() / ".env",
]

for env_path in POSSIBLE_ENV_PATHS:
    if env_path.exists():
        load_dotenv(env_path, override=False)
        break


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./mouna.db"

    # Shop calendar (expiry days are counted in this timezone).
    # Stored merge keys keep the day computed at write time, so changing this
    # on a live database stops new stock merging into existing batches.
    TIMEZONE: str = "Asia/Riyadh"

    # Server
    SERVER_HOST: str = "127.0.0.1"
    SERVER_PORT: int = 3000
    CORS_ORIGINS: List[str] = ["*"]

    # Open Food Facts barcode lookup
    PRODUCT_LOOKUP_URL: str = "https://world.openfoodfacts.org/api/v0/product"
    PRODUCT_LOOKUP_TIMEOUT: float = 5.0
    PRODUCT_LOOKUP_RETRIES: int = 1

    # OneSignal push notifications
    ONESIGNAL_REST_API_KEY: Optional[str] = None
    ONESIGNAL_APP_ID: str = "b652d9f4-6251-4741-af3d-f1cea47e50d8"
    ONESIGNAL_API_URL: str = "https://onesignal.com/api/v1/notifications"
    ONESIGNAL_TIMEOUT: float = 10.0

    # Logging
    LOG_FILE: Optional[str] = "app.log"
    LOG_LEVEL: str = "DEBUG"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
