"""Application configuration."""

from os import getenv

from pydantic import BaseModel


class Settings(BaseModel):
    """Runtime settings shared by the ordering API and the ordering client."""

    app_name: str = "Tableside Ordering API"
    app_env: str = getenv("APP_ENV", "dev")
    database_url: str = getenv("DATABASE_URL", "sqlite:///./tableside.db")
    api_prefix: str = getenv("API_PREFIX", "/api")
    api_base_url: str = getenv("TABLESIDE_API_URL", "http://localhost:8000/api")
    request_timeout_seconds: float = float(getenv("REQUEST_TIMEOUT_SECONDS", "10"))
    order_poll_interval_seconds: float = float(getenv("ORDER_POLL_INTERVAL_SECONDS", "5"))
    cart_storage_url: str = getenv("CART_STORAGE_URL", "sqlite:///./tableside-cart.db")
    staff_api_key: str = getenv("STAFF_API_KEY", "")
    seed_demo_data: bool = getenv("SEED_DEMO_DATA", "1" if getenv("APP_ENV", "dev") == "dev" else "0") == "1"


settings: Settings = Settings()
