from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from the project root so it loads regardless of cwd
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(str(_ENV_FILE), ".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = "postgresql://localhost:5432/salon_booking"
    database_ssl: bool = False

    # CORS
    cors_origins: str = "http://localhost:3000"

    # Availability rules
    slot_step_minutes: int = 15
    # False: a service must finish before closing time; True: it may end exactly at closing
    slot_end_inclusive: bool = False
    business_timezone: str = "UTC"

    # Reservations
    reservation_lock_timeout_seconds: float = 5.0

    # Waitlist
    waitlist_notify_limit: int = 3
    waitlist_cleanup_interval_seconds: int = 24 * 60 * 60

    # Env
    env: str = "development"

    # Email (SMTP). Leave smtp_host empty to disable sending.
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    from_email: str = ""
    from_name: str = "Salon Booking"
    site_name: str = "Salon Booking"
    # Link included in waitlist emails so customers can grab the freed slot
    booking_url: str = ""

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def email_enabled(self) -> bool:
        return bool(self.smtp_host and self.smtp_user and self.smtp_password and self.from_email)


settings = Settings()
