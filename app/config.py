"""
Application configuration via Pydantic Settings
"""
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.enums import AIProvider
from app.services.reconciler import ReconciliationPolicy


class Settings(BaseSettings):
    """Settings read from environment variables"""

    # Application Settings
    APP_NAME: str = "loto-scanner"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # CORS Settings
    ALLOWED_ORIGINS: str = "http://localhost:8081,http://localhost:19006"

    # AI Settings
    AI_PROVIDER: AIProvider = AIProvider.GEMINI
    AI_TIMEOUT_SECONDS: float = 90.0

    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-5.2"
    OPENAI_REASONING_EFFORT: str = ""

    GOOGLE_API_KEY: str = ""
    GOOGLE_AI_MODEL: str = "gemini-2.5-flash"
    GOOGLE_AI_THINKING: str = ""

    # OCR Settings
    OCR_ENABLED: bool = True
    OCR_TIMEOUT_SECONDS: float = 30.0
    EASYOCR_LANGUAGES: str = "en"
    EASYOCR_USE_GPU: bool = False

    RECOGNIZER_RETRY_BACKOFF_SECONDS: float = 1.0

    @property
    def easyocr_languages_list(self) -> List[str]:
        """EasyOCR languages parsed from the comma separated string"""
        return [lang.strip() for lang in self.EASYOCR_LANGUAGES.split(",")]

    # Image Settings
    MAX_IMAGE_SIZE_MB: int = 5
    ALLOWED_IMAGE_FORMATS: str = "jpeg,png,webp"

    # Storage Settings
    SCAN_HISTORY_LIMIT: int = 50
    LOTTERY_RESULTS_FILE: str = ""  # JSON list of published draw results, empty for none

    # Calibration: hand-tuned thresholds of the reconciliation and validation steps
    RECONCILE_HIGH_AGREEMENT: float = 0.85
    RECONCILE_FULL_AGREEMENT: float = 0.95
    RECONCILE_MODERATE_AGREEMENT: float = 0.70
    RECONCILE_CONFIDENT_AI: float = 0.7
    RECONCILE_CONFIDENCE_FLOOR: float = 0.4
    VALIDATION_MIN_CONFIDENCE: float = 0.6
    VALIDATION_CONFIRM_CONFIDENCE: float = 0.85

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def allowed_origins_list(self) -> List[str]:
        """CORS origins parsed from the comma separated string"""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    @property
    def allowed_image_formats_list(self) -> List[str]:
        """Image formats parsed from the comma separated string"""
        return [fmt.strip().lower() for fmt in self.ALLOWED_IMAGE_FORMATS.split(",")]

    @property
    def reconciliation_policy(self) -> ReconciliationPolicy:
        return ReconciliationPolicy(
            high_agreement=self.RECONCILE_HIGH_AGREEMENT,
            full_agreement=self.RECONCILE_FULL_AGREEMENT,
            moderate_agreement=self.RECONCILE_MODERATE_AGREEMENT,
            confident_ai=self.RECONCILE_CONFIDENT_AI,
            confidence_floor=self.RECONCILE_CONFIDENCE_FLOOR,
        )


# Singleton instance
_settings: Settings = None


def get_settings() -> Settings:
    """Get settings (singleton)"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
