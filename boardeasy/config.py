import logging
from decimal import Decimal
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Application
    PROJECT_NAME: str = "BoardEasy Booking Service"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    # Comma-separated origins for CORS. If empty, uses localhost defaults.
    CORS_ORIGINS: str = ""

    # Upstream BoardEasy API (routes, auth, bookings)
    API_BASE_URL: str = "http://localhost:8080"
    HTTP_TIMEOUT_SECONDS: float = 15.0

    # City autocomplete
    CITY_DEBOUNCE_SECONDS: float = 0.3
    CITY_MIN_QUERY_LENGTH: int = 2
    CITY_SUGGESTION_LIMIT: int = 20

    # Offerings
    OFFERING_PROVIDER: str = "synthetic"  # synthetic|live
    OFFERING_COUNT: int = 12
    OFFERING_PRICE_JITTER: int = 300

    # Seats
    TOTAL_SEATS: int = 40
    DEFAULT_BOOKED_SEATS: List[int] = [5, 12, 18, 23, 29, 34]

    # Passengers
    MIN_PASSENGERS: int = 1
    MAX_PASSENGERS: int = 6
    MIN_PASSENGER_AGE: int = 5
    MAX_PASSENGER_AGE: int = 100
    VALIDATE_PASSENGERS_BEFORE_SEATS: bool = True

    # Browser sessions held in memory
    MAX_SESSIONS: int = 1000
    SESSION_IDLE_SECONDS: float = 1800.0

    # Pricing policy
    TAX_RATE: Decimal = Decimal("0.18")
    SERVICE_CHARGE: int = 30

    @property
    def cors_origins(self) -> List[str]:
        if not self.CORS_ORIGINS:
            return ["http://localhost:3000", "http://localhost:5173"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


def configure_logging(config: "Settings") -> None:
    """Install a basic root handler at the configured level"""
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


settings = Settings()
