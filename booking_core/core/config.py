from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Barbershop Booking"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    BUSINESS_TIMEZONE: str = "Asia/Jakarta"

    SLOT_STEP_MINUTES: int = Field(default=30, gt=0)
    CUSTOMER_CAN_CANCEL_CONFIRMED: bool = True
    AUTO_CONFIRM_CASH_BOOKINGS: bool = False
    BOOKING_WRITE_RETRIES: int = Field(default=5, gt=0)

    STORE_PROVIDER: str = "memory"  # "memory" | "json"
    BOOKING_DATA_DIR: str = "./data/bookings"

    EVENT_WEBHOOK_URL: str | None = None
    EVENT_WEBHOOK_TIMEOUT_SECONDS: float = Field(default=3.0, gt=0)


settings = Settings()
