import warnings

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings

_DEFAULT_API_BASE_URL = "http://localhost:8080/api"


class Settings(BaseSettings):
    # Workshop REST API
    API_BASE_URL: str = _DEFAULT_API_BASE_URL
    API_HEALTHCHECK_URL: str = "http://localhost:8080/healthcheck"
    API_TIMEOUT_SECONDS: float = 15.0

    @field_validator("API_BASE_URL", "API_HEALTHCHECK_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"URL must start with http:// or https://, got '{v}'")
        return v.rstrip("/")

    # Session cookie holding the backend bearer token
    SESSION_COOKIE_NAME: str = "token"
    SESSION_COOKIE_MAX_AGE_DAYS: int = 7

    # Sentry
    SENTRY_DSN: str = ""

    # App
    APP_ENV: str = "development"

    @field_validator("APP_ENV")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        allowed = {"development", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"APP_ENV must be one of {allowed}, got '{v}'")
        return v
    APP_DEBUG: bool = False

    # Lists
    PAGE_SIZE: int = 10
    LOOKUP_LIMIT: int = 100
    DASHBOARD_RECENT_BOOKINGS: int = 5

    # Booking window
    BOOKING_MINIMUM_ADVANCE_MINUTES: int = 60
    BOOKING_OPENING_HOUR: int = 8
    BOOKING_CLOSING_HOUR: int = 20
    BOOKING_SLOT_MINUTES: int = 30

    # Display
    DISPLAY_TIMEZONE_LABEL: str = "WIB"

    @model_validator(mode="after")
    def validate_booking_hours(self) -> "Settings":
        if not 0 <= self.BOOKING_OPENING_HOUR < self.BOOKING_CLOSING_HOUR <= 24:
            raise ValueError(
                "BOOKING_OPENING_HOUR must be before BOOKING_CLOSING_HOUR (both within 0-24)"
            )
        if self.BOOKING_SLOT_MINUTES <= 0 or 60 % self.BOOKING_SLOT_MINUTES:
            raise ValueError("BOOKING_SLOT_MINUTES must be a positive divisor of 60")
        return self

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Fail in production for insecure defaults, warn in development."""
        if self.is_production:
            if not self.API_BASE_URL.startswith("https://"):
                raise ValueError(
                    "API_BASE_URL must use https:// in production, the bearer token travels with every request."
                )
        elif self.API_BASE_URL == _DEFAULT_API_BASE_URL:
            warnings.warn(
                "API_BASE_URL is using the local development backend.",
                stacklevel=2,
            )
        return self

    @property
    def is_production(self) -> bool:
        return self.APP_ENV in ("production", "staging")

    @property
    def session_cookie_max_age(self) -> int:
        return self.SESSION_COOKIE_MAX_AGE_DAYS * 24 * 60 * 60

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
