from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Bookkee OCR API"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8080"]

    # API limits
    MAX_TEXT_LENGTH: int = 100_000

    # Date heuristics
    TWO_DIGIT_YEAR_PIVOT: int = 50  # YY > pivot → 19YY, else 20YY
    MONTH_DAY_ROLLOVER_DAYS: Optional[int] = None  # e.g. 30 to enable rollover

    # Notes heuristics
    NOTES_SCAN_LINES: int = 6
    NOTES_MAX_LENGTH: int = 30

    # Line normalization
    CANONICALIZE_CURRENCY: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
